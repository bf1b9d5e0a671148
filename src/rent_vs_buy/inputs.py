"""
Read form-style settings into an :class:`AssumptionSet`.

Settings are flat mappings keyed by the form field ids (``home-price``,
``down-payment`` ...) with text or numeric values, the same shape presets
are stored in.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from .errors import InputError
from .schemas import AssumptionSet

Number = Union[int, float]

# form field id -> AssumptionSet attribute
FIELDS: Dict[str, str] = {
    "home-price": "home_price",
    "down-payment": "down_payment_pct",
    "interest-rate": "interest_rate_pct",
    "loan-term": "loan_term_years",
    "pmi": "pmi_monthly",
    "buyer-hoa": "buyer_hoa_monthly",
    "buyer-utilities": "buyer_utilities_monthly",
    "property-tax": "property_tax_rate_pct",
    "home-insurance": "home_insurance_annual",
    "maintenance": "maintenance_rate_pct",
    "home-appreciation": "appreciation_rate_pct",
    "buy-closing-cost": "buy_closing_cost_pct",
    "sell-closing-cost": "sell_closing_cost_pct",
    "monthly-rent": "monthly_rent",
    "rent-increase": "rent_increase_pct",
    "renter-hoa": "renter_hoa_monthly",
    "renter-utilities": "renter_utilities_monthly",
    "renter-insurance": "renters_insurance_annual",
    "investment-return": "investment_return_pct",
    "tax-rate": "tax_rate_pct",
    "monthly-income": "monthly_income",
    "other-monthly-expenses-buy": "other_monthly_expenses_buy",
    "other-monthly-expenses-rent": "other_monthly_expenses_rent",
    "duration": "duration_years",
}

INTEGER_FIELDS = frozenset({"loan-term", "duration"})
MAX_YEARS = 100

# Growth rates may be negative; everything else is a cost, price or share.
SIGNED_FIELDS = frozenset(
    {"interest-rate", "home-appreciation", "rent-increase", "investment-return"}
)

DEFAULT_SETTINGS: Dict[str, str] = {
    "home-price": "400000",
    "down-payment": "20",
    "interest-rate": "6",
    "loan-term": "30",
    "pmi": "0",
    "buyer-hoa": "0",
    "buyer-utilities": "0",
    "property-tax": "1.2",
    "home-insurance": "2000",
    "maintenance": "1",
    "home-appreciation": "3",
    "buy-closing-cost": "0",
    "sell-closing-cost": "0",
    "monthly-rent": "2000",
    "rent-increase": "3",
    "renter-hoa": "0",
    "renter-utilities": "0",
    "renter-insurance": "0",
    "investment-return": "5",
    "tax-rate": "0",
    "monthly-income": "10000",
    "other-monthly-expenses-buy": "0",
    "other-monthly-expenses-rent": "0",
    "duration": "30",
}


def parse_settings(settings: Mapping[str, Any]) -> AssumptionSet:
    """Validate every form field and build the assumption set."""
    if not isinstance(settings, Mapping):
        raise InputError(
            "settings", f"expected a mapping of fields, got {type(settings).__name__}"
        )
    values: Dict[str, Number] = {}
    for key, attr in FIELDS.items():
        if key not in settings:
            raise InputError(key, "missing value")
        number = _to_number(key, settings[key])
        if key in INTEGER_FIELDS:
            number = int(number)
            if not 1 <= number <= MAX_YEARS:
                raise InputError(key, f"must be between 1 and {MAX_YEARS} years")
        elif key not in SIGNED_FIELDS and number < 0:
            raise InputError(key, "must not be negative")
        values[attr] = number

    if values["down_payment_pct"] > 100:
        raise InputError("down-payment", "must be between 0 and 100")
    return AssumptionSet(**values)


def to_settings(assumptions: AssumptionSet) -> Dict[str, Number]:
    return {key: getattr(assumptions, attr) for key, attr in FIELDS.items()}


def merge_settings(
    base: Mapping[str, Any], overrides: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    if not isinstance(base, Mapping):
        raise InputError(
            "settings", f"expected a mapping of fields, got {type(base).__name__}"
        )
    merged = dict(base)
    for key, value in (overrides or {}).items():
        if key not in FIELDS:
            raise InputError(key, "unknown field")
        merged[key] = value
    return merged


def parse_overrides(pairs: Iterable[str]) -> Dict[str, str]:
    """Turn ``KEY=VALUE`` strings into a settings mapping."""
    overrides: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise InputError(pair, "expected KEY=VALUE")
        overrides[key] = value.strip()
    return overrides


def _to_number(key: str, raw: Any) -> float:
    if isinstance(raw, bool):
        raise InputError(key, f"could not read {raw!r} as a number")
    if isinstance(raw, (int, float)):
        number = float(raw)
    else:
        text = str(raw).strip().replace(",", "")
        if not text:
            raise InputError(key, "missing value")
        try:
            number = float(text)
        except ValueError as exc:
            raise InputError(key, f"could not read {raw!r} as a number") from exc
    if not math.isfinite(number):
        raise InputError(key, "must be a finite number")
    return number
