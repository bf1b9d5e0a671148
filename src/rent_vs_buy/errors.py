class RentVsBuyError(Exception):
    """Base class for errors reported back to the user."""


class InputError(RentVsBuyError, ValueError):
    """An assumption could not be read or is out of range."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


class PresetError(RentVsBuyError):
    """A preset could not be saved, found, or read."""


class MarketDataError(RentVsBuyError, RuntimeError):
    """A market data source returned nothing usable."""
