from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

import typer

from .errors import RentVsBuyError
from .inputs import (
    DEFAULT_SETTINGS,
    merge_settings,
    parse_overrides,
    parse_settings,
    to_settings,
)
from .market import CensusACSClient, HMDAClient, MarketDataAssembler, market_settings
from .model import compare_scenarios, project
from .presets import DEFAULT_STORE_PATH, PresetStore
from .report import (
    chart_series,
    comparison_series,
    render_comparison,
    render_single,
    timeline,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

app = typer.Typer(help="Project net worth from renting versus buying a home.")
presets_app = typer.Typer(help="Save, list and delete named assumption sets.")
app.add_typer(presets_app, name="presets")


def _default_store_path() -> Path:
    return Path(os.environ.get("RENT_VS_BUY_PRESETS", str(DEFAULT_STORE_PATH)))


def _default_census_key() -> Optional[str]:
    return os.environ.get("CENSUS_API_KEY")


def _default_hmda_table() -> str:
    return os.environ.get("HMDA_TABLE", "bigquery-public-data.hmda.hmda_2023")


def _store(ctx: typer.Context) -> PresetStore:
    return ctx.obj["store"]


def _fail(exc: RentVsBuyError) -> None:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


def _settings(store: PresetStore, preset: Optional[str], overrides: List[str]) -> dict:
    base = DEFAULT_SETTINGS
    if preset:
        base = store.settings(preset)
        if base is None:
            raise typer.BadParameter(f'No preset named "{preset}"', param_hint="--preset")
    return merge_settings(base, parse_overrides(overrides))


@app.callback()
def main(
    ctx: typer.Context,
    store: Path = typer.Option(
        default_factory=_default_store_path,
        help="Preset file (env RENT_VS_BUY_PRESETS if omitted).",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT
    )
    ctx.obj = {"store": PresetStore(store)}


@app.command()
def run(
    ctx: typer.Context,
    preset: Optional[str] = typer.Option(None, help="Start from a saved preset."),
    set_: List[str] = typer.Option(
        [], "--set", help="Override a field, e.g. --set home-price=550000."
    ),
    show_timeline: bool = typer.Option(
        False, "--timeline", help="Dump the yearly snapshots and chart series as JSON."
    ),
) -> None:
    """
    Project a single scenario and print the verdict and summary table.
    """
    try:
        assumptions = parse_settings(_settings(_store(ctx), preset, set_))
    except RentVsBuyError as exc:
        _fail(exc)
    result = project(assumptions)
    logger.debug("Projected %d years", result.duration_years)
    typer.echo(render_single(result))

    if show_timeline:
        payload = {"timeline": timeline(result), "chart": chart_series(result)}
        typer.echo(json.dumps(payload, indent=2))


@app.command()
def compare(
    ctx: typer.Context,
    name_a: str = typer.Argument(..., help="Preset for scenario A."),
    name_b: str = typer.Argument(..., help="Preset for scenario B."),
    series: bool = typer.Option(False, help="Also dump the chart series as JSON."),
) -> None:
    """
    Compare two saved presets side by side.
    """
    try:
        scenario_a, scenario_b = _store(ctx).load_pair(name_a, name_b)
    except RentVsBuyError as exc:
        _fail(exc)
    result_a, result_b = compare_scenarios(scenario_a, scenario_b)
    typer.echo(render_comparison(result_a, result_b, name_a, name_b))

    if series:
        payload = comparison_series(result_a, result_b, name_a, name_b)
        typer.echo(json.dumps(payload, indent=2))


@app.command()
def seed(
    ctx: typer.Context,
    cbsa: str = typer.Argument(..., help="CBSA code, e.g., 31080 for Los Angeles."),
    name: str = typer.Argument(..., help="Name to save the seeded preset under."),
    acs_year: int = typer.Option(2023, help="ACS vintage to query."),
    hmda_year: int = typer.Option(2023, help="HMDA filing year to query."),
    census_api_key: Optional[str] = typer.Option(
        default_factory=_default_census_key,
        help="Census API key (env CENSUS_API_KEY if omitted).",
    ),
    hmda_table: str = typer.Option(
        default_factory=_default_hmda_table,
        help="Fully-qualified HMDA BigQuery table.",
    ),
    gcp_project: Optional[str] = typer.Option(
        None, help="GCP project for the BigQuery client (defaults to env)."
    ),
) -> None:
    """
    Build a preset from ACS + HMDA medians for a CBSA.
    """
    assembler = MarketDataAssembler(
        acs_client=CensusACSClient(api_key=census_api_key),
        hmda_client=HMDAClient(table=hmda_table, project=gcp_project),
    )
    try:
        defaults = assembler.build_defaults(cbsa, acs_year=acs_year, hmda_year=hmda_year)
        assumptions = parse_settings(market_settings(defaults))
        saved = _store(ctx).save(name, assumptions)
    except RentVsBuyError as exc:
        _fail(exc)

    typer.echo(f"Location: {defaults.name} (CBSA {defaults.cbsa})")
    typer.echo(f"Median home price: ${assumptions.home_price:,.0f}")
    typer.echo(f"Down payment: {assumptions.down_payment_pct:.1f}%")
    typer.echo(f"Mortgage rate: {assumptions.interest_rate_pct:.2f}%")
    typer.echo(f"Median rent: ${assumptions.monthly_rent:,.0f}")
    typer.echo(f"Median monthly income: ${assumptions.monthly_income:,.0f}")
    typer.echo(f'Preset "{saved}" saved!')


@presets_app.command("list")
def list_presets(ctx: typer.Context) -> None:
    """List saved presets."""
    try:
        names = _store(ctx).names()
    except RentVsBuyError as exc:
        _fail(exc)
    if not names:
        typer.echo("No presets saved")
        return
    for name in names:
        typer.echo(name)


@presets_app.command("save")
def save_preset(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Preset name; an existing one is overwritten."),
    preset: Optional[str] = typer.Option(None, help="Start from another preset."),
    set_: List[str] = typer.Option([], "--set", help="Override a field, KEY=VALUE."),
) -> None:
    """Save the default settings, with overrides, under a name."""
    store = _store(ctx)
    try:
        assumptions = parse_settings(_settings(store, preset, set_))
        saved = store.save(name, assumptions)
    except RentVsBuyError as exc:
        _fail(exc)
    typer.echo(f'Preset "{saved}" saved!')


@presets_app.command("show")
def show_preset(ctx: typer.Context, name: str) -> None:
    """Print a preset's settings as JSON."""
    try:
        assumptions = _store(ctx).get(name)
    except RentVsBuyError as exc:
        _fail(exc)
    if assumptions is None:
        typer.echo(f'No preset named "{name}"', err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(to_settings(assumptions), indent=2))


@presets_app.command("delete")
def delete_preset(ctx: typer.Context, name: str) -> None:
    """Delete a preset; deleting a missing name does nothing."""
    try:
        deleted = _store(ctx).delete(name)
    except RentVsBuyError as exc:
        _fail(exc)
    if deleted:
        typer.echo(f'Preset "{name}" deleted.')
    else:
        typer.echo(f'No preset named "{name}"')


if __name__ == "__main__":
    app()
