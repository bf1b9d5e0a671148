from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class AssumptionSet:
    """Every numeric input to one projection.

    Percent fields hold whole numbers (6.0 means 6%); the engine converts
    them to fractions itself.
    """

    # Purchase
    home_price: float
    down_payment_pct: float
    interest_rate_pct: float  # annual
    loan_term_years: int
    pmi_monthly: float
    buyer_hoa_monthly: float
    buyer_utilities_monthly: float
    property_tax_rate_pct: float  # of current home value
    home_insurance_annual: float
    maintenance_rate_pct: float  # of original price
    appreciation_rate_pct: float
    buy_closing_cost_pct: float
    sell_closing_cost_pct: float
    # Rental
    monthly_rent: float
    rent_increase_pct: float
    renter_hoa_monthly: float
    renter_utilities_monthly: float
    renters_insurance_annual: float
    # Shared
    investment_return_pct: float
    tax_rate_pct: float  # collected but not applied to any cash flow
    monthly_income: float
    other_monthly_expenses_buy: float
    other_monthly_expenses_rent: float
    duration_years: int

    @property
    def down_payment_amount(self) -> float:
        return self.home_price * (self.down_payment_pct / 100.0)

    @property
    def loan_amount(self) -> float:
        return self.home_price - self.down_payment_amount

    @property
    def number_of_payments(self) -> int:
        return self.loan_term_years * 12


@dataclass(frozen=True)
class YearSnapshot:
    year: int
    renter_net_worth: float
    buyer_net_worth: float
    renter_portfolio: float
    buyer_portfolio: float
    home_equity: float  # net of projected sale costs
    home_value: float = 0.0
    loan_balance: float = 0.0
    interest_paid: float = 0.0
    pmi_monthly: float = 0.0


@dataclass
class ProjectionResult:
    duration_years: int
    loan_amount: float
    monthly_payment: float
    final_renter_net_worth: float = 0.0
    final_buyer_net_worth: float = 0.0
    final_renter_portfolio: float = 0.0
    final_buyer_portfolio: float = 0.0
    final_home_equity: float = 0.0
    snapshots: List[YearSnapshot] = field(default_factory=list)

    @property
    def verdict(self) -> str:
        if self.final_buyer_net_worth > self.final_renter_net_worth:
            return "Buying"
        return "Renting"

    @property
    def advantage(self) -> float:
        return abs(self.final_buyer_net_worth - self.final_renter_net_worth)

    @property
    def break_even_year(self) -> Optional[int]:
        """First year in which owning is ahead of renting, if any."""
        for snap in self.snapshots:
            if snap.buyer_net_worth > snap.renter_net_worth:
                return snap.year
        return None

    @property
    def rent_series(self) -> List[float]:
        return [snap.renter_net_worth for snap in self.snapshots]

    @property
    def buy_series(self) -> List[float]:
        return [snap.buyer_net_worth for snap in self.snapshots]


@dataclass
class MarketDefaults:
    """Holds CBSA-level medians assembled from ACS + HMDA."""

    cbsa: str
    name: str
    monthly_income: float
    monthly_rent: float
    property_value: float
    loan_amount: float
    interest_rate: float  # annual percentage, e.g., 6.25
    annual_property_taxes: float = 0.0
    annual_home_insurance: float = 0.0
    monthly_utilities: float = 0.0

    @property
    def down_payment_pct(self) -> float:
        if self.property_value <= 0:
            return 0.0
        down_payment = max(self.property_value - self.loan_amount, 0.0)
        return down_payment / self.property_value * 100.0

    @property
    def property_tax_rate_pct(self) -> float:
        if self.property_value <= 0:
            return 0.0
        return self.annual_property_taxes / self.property_value * 100.0
