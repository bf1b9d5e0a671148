import pytest

from rent_vs_buy.inputs import DEFAULT_SETTINGS
from rent_vs_buy.schemas import AssumptionSet


@pytest.fixture
def base_assumptions():
    # 400k home, 20% down, 6% over 30 years, one-year horizon
    return AssumptionSet(
        home_price=400_000.0,
        down_payment_pct=20.0,
        interest_rate_pct=6.0,
        loan_term_years=30,
        pmi_monthly=0.0,
        buyer_hoa_monthly=0.0,
        buyer_utilities_monthly=0.0,
        property_tax_rate_pct=1.2,
        home_insurance_annual=2_000.0,
        maintenance_rate_pct=1.0,
        appreciation_rate_pct=3.0,
        buy_closing_cost_pct=0.0,
        sell_closing_cost_pct=0.0,
        monthly_rent=2_000.0,
        rent_increase_pct=3.0,
        renter_hoa_monthly=0.0,
        renter_utilities_monthly=0.0,
        renters_insurance_annual=0.0,
        investment_return_pct=5.0,
        tax_rate_pct=0.0,
        monthly_income=10_000.0,
        other_monthly_expenses_buy=0.0,
        other_monthly_expenses_rent=0.0,
        duration_years=1,
    )


@pytest.fixture
def settings():
    return dict(DEFAULT_SETTINGS)
