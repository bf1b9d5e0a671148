from __future__ import annotations

import math
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .schemas import ProjectionResult

NOT_APPLICABLE = "N/A"


def format_currency(value: float) -> str:
    if not math.isfinite(value):
        return "NaN" if math.isnan(value) else f"{value}"
    sign = "-" if round(value) < 0 else ""
    return f"{sign}${abs(value):,.0f}"


def render_single(result: ProjectionResult) -> str:
    lines = [
        f"For this scenario, {result.verdict} is better by "
        f"{format_currency(result.advantage)}.",
        f"Monthly mortgage payment: {format_currency(result.monthly_payment)}",
    ]
    if result.break_even_year:
        lines.append(f"Buying pulls ahead in year {result.break_even_year}.")
    lines.append("")
    lines.extend(
        _table(
            ("Metric", "Renting", "Buying"),
            [
                (
                    "Home Equity (net of selling costs)",
                    NOT_APPLICABLE,
                    format_currency(result.final_home_equity),
                ),
                (
                    "Investment Portfolio",
                    format_currency(result.final_renter_portfolio),
                    format_currency(result.final_buyer_portfolio),
                ),
                (
                    "Total Net Worth",
                    format_currency(result.final_renter_net_worth),
                    format_currency(result.final_buyer_net_worth),
                ),
            ],
        )
    )
    return "\n".join(lines)


def render_comparison(
    result_a: ProjectionResult,
    result_b: ProjectionResult,
    name_a: str,
    name_b: str,
) -> str:
    """Side-by-side table; the larger value in each row is marked with ``*``."""
    metrics = [
        ("Final Net Worth (Renting)", "final_renter_net_worth"),
        ("Final Net Worth (Buying)", "final_buyer_net_worth"),
        ("Home Equity (Buying)", "final_home_equity"),
        ("Investment Portfolio (Buying)", "final_buyer_portfolio"),
    ]
    rows = []
    for label, attr in metrics:
        value_a = getattr(result_a, attr)
        value_b = getattr(result_b, attr)
        rows.append(
            (
                label,
                _mark(format_currency(value_a), value_a > value_b),
                _mark(format_currency(value_b), value_b > value_a),
            )
        )

    lines = [
        f"{name_a}: {result_a.verdict} is better.",
        f"{name_b}: {result_b.verdict} is better.",
        "",
    ]
    lines.extend(
        _table(("Metric", f"Scenario A: {name_a}", f"Scenario B: {name_b}"), rows)
    )
    return "\n".join(lines)


def timeline(result: ProjectionResult) -> List[Dict[str, Any]]:
    return [asdict(snap) for snap in result.snapshots]


def year_labels(duration_years: int) -> List[str]:
    return [f"Year {year}" for year in range(1, duration_years + 1)]


def chart_series(
    result: ProjectionResult, label: Optional[str] = None
) -> Dict[str, Any]:
    prefix = f"{label} - " if label else ""
    return {
        "title": f"Net Worth Over {result.duration_years} Years",
        "labels": year_labels(result.duration_years),
        "datasets": [
            {"label": f"{prefix}Renting Net Worth", "data": result.rent_series},
            {"label": f"{prefix}Buying Net Worth", "data": result.buy_series},
        ],
    }


def comparison_series(
    result_a: ProjectionResult,
    result_b: ProjectionResult,
    name_a: str,
    name_b: str,
) -> Dict[str, Any]:
    return {
        "title": f"Scenario Comparison: {name_a} vs. {name_b}",
        "labels": year_labels(result_a.duration_years),
        "datasets": [
            {"label": f"{name_a} - Renting", "data": result_a.rent_series},
            {"label": f"{name_a} - Buying", "data": result_a.buy_series},
            {"label": f"{name_b} - Renting", "data": result_b.rent_series},
            {"label": f"{name_b} - Buying", "data": result_b.buy_series},
        ],
    }


def _mark(text: str, highlight: bool) -> str:
    return f"{text} *" if highlight else text


def _table(header: Tuple[str, ...], rows: Sequence[Tuple[str, ...]]) -> List[str]:
    widths = [
        max(len(row[col]) for row in [header, *rows]) for col in range(len(header))
    ]

    def fmt(row: Tuple[str, ...]) -> str:
        first, *rest = row
        cells = [first.ljust(widths[0])]
        cells += [cell.rjust(width) for cell, width in zip(rest, widths[1:])]
        return "  ".join(cells)

    return [fmt(header), "  ".join("-" * width for width in widths)] + [
        fmt(row) for row in rows
    ]
