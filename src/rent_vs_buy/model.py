from __future__ import annotations

import math
from typing import List, Tuple

from .schemas import AssumptionSet, ProjectionResult, YearSnapshot

PMI_DOWN_PAYMENT_THRESHOLD = 0.2
PMI_LOAN_TO_VALUE_CUTOFF = 0.8


def project(assumptions: AssumptionSet) -> ProjectionResult:
    """Project buyer and renter net worth year by year over the horizon."""
    a = assumptions
    down_payment_fraction = pct(a.down_payment_pct)
    monthly_rate = pct(a.interest_rate_pct) / 12.0
    property_tax_rate = pct(a.property_tax_rate_pct)
    maintenance_rate = pct(a.maintenance_rate_pct)
    appreciation_rate = pct(a.appreciation_rate_pct)
    sell_closing_rate = pct(a.sell_closing_cost_pct)
    rent_increase_rate = pct(a.rent_increase_pct)
    investment_growth = 1 + pct(a.investment_return_pct)

    loan_amount = a.loan_amount
    mortgage_payment = monthly_mortgage_payment(
        loan_amount, a.interest_rate_pct, a.loan_term_years
    )
    pmi = 0.0 if down_payment_fraction >= PMI_DOWN_PAYMENT_THRESHOLD else a.pmi_monthly
    buying_closing_costs = a.home_price * pct(a.buy_closing_cost_pct)

    renter_portfolio = a.down_payment_amount + buying_closing_costs
    buyer_portfolio = 0.0
    home_value = a.home_price
    balance = loan_amount
    rent = a.monthly_rent
    annual_income = a.monthly_income * 12
    snapshots: List[YearSnapshot] = []

    for year in range(1, a.duration_years + 1):
        interest_paid = 0.0
        if loan_amount > 0:
            for _ in range(12):
                interest = balance * monthly_rate
                interest_paid += interest
                balance -= mortgage_payment - interest

        # Checked against last year's value, before this year's appreciation.
        if home_value and balance / home_value < PMI_LOAN_TO_VALUE_CUTOFF:
            pmi = 0.0

        buyer_outflow = (
            mortgage_payment * 12
            + home_value * property_tax_rate
            + a.home_insurance_annual
            + a.home_price * maintenance_rate
            + (a.buyer_hoa_monthly + a.buyer_utilities_monthly + pmi) * 12
        )
        buyer_savings = annual_income - buyer_outflow - a.other_monthly_expenses_buy * 12
        buyer_portfolio = (buyer_portfolio + max(buyer_savings, 0.0)) * investment_growth

        home_value *= 1 + appreciation_rate
        home_equity = home_value - balance - home_value * sell_closing_rate
        buyer_net_worth = home_equity + buyer_portfolio

        # Renter's insurance is an annual figure, HOA and utilities are monthly.
        renter_outflow = (
            rent * 12
            + (a.renter_hoa_monthly + a.renter_utilities_monthly) * 12
            + a.renters_insurance_annual
        )
        renter_savings = annual_income - renter_outflow - a.other_monthly_expenses_rent * 12
        renter_portfolio = (renter_portfolio + max(renter_savings, 0.0)) * investment_growth
        rent *= 1 + rent_increase_rate

        snapshots.append(
            YearSnapshot(
                year=year,
                renter_net_worth=renter_portfolio,
                buyer_net_worth=buyer_net_worth,
                renter_portfolio=renter_portfolio,
                buyer_portfolio=buyer_portfolio,
                home_equity=home_equity,
                home_value=home_value,
                loan_balance=balance,
                interest_paid=interest_paid,
                pmi_monthly=pmi,
            )
        )

    result = ProjectionResult(
        duration_years=a.duration_years,
        loan_amount=loan_amount,
        monthly_payment=mortgage_payment,
        snapshots=snapshots,
    )
    if snapshots:
        last = snapshots[-1]
        result.final_renter_net_worth = last.renter_net_worth
        result.final_buyer_net_worth = last.buyer_net_worth
        result.final_renter_portfolio = last.renter_portfolio
        result.final_buyer_portfolio = last.buyer_portfolio
        result.final_home_equity = last.home_equity
    return result


def compare_scenarios(
    scenario_a: AssumptionSet, scenario_b: AssumptionSet
) -> Tuple[ProjectionResult, ProjectionResult]:
    return project(scenario_a), project(scenario_b)


def monthly_mortgage_payment(
    principal: float, annual_rate_pct: float, term_years: int
) -> float:
    term_months = term_years * 12
    if principal <= 0 or term_months <= 0:
        return 0.0
    monthly_rate = pct(annual_rate_pct) / 12.0
    try:
        discount = (1 + monthly_rate) ** (-term_months)
    except (OverflowError, ZeroDivisionError):
        discount = math.inf
    # Rates too small to move (1 + r) amortize straight-line.
    if discount == 1:
        return principal / term_months
    return principal * monthly_rate / (1 - discount)


def pct(value: float) -> float:
    return value / 100.0
