"""
Rent vs. buy projection toolkit.

This package projects, year by year, the net worth of buying a home with a
mortgage against renting and investing the difference, and compares two
such projections side by side. Assumption sets can be typed in, kept as
named presets, or seeded from ACS and HMDA market medians.
"""

from .schemas import (
    AssumptionSet,
    YearSnapshot,
    ProjectionResult,
    MarketDefaults,
)
from .model import compare_scenarios, project

__all__ = [
    "AssumptionSet",
    "YearSnapshot",
    "ProjectionResult",
    "MarketDefaults",
    "compare_scenarios",
    "project",
]
