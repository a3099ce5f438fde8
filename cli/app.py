from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn, Optional

import typer

from cli.render import render_nearby, render_series
from datastore.measurement_cache import MeasurementCache
from logging_config import configure_logging
from models.records import MeasurementType
from services.aggregator import Aggregator
from services.parsing import MalformedLinePolicy
from services.provider import DataProvider, build_default_provider
from settings import get_settings
from storage.station_files import StationDataDirectory


@dataclass
class CLIState:
    provider: DataProvider


app = typer.Typer(
    help="Query yearly, seasonal, monthly, and daily figures from local GHCN-Daily files.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


def _build_provider(data_dir: Optional[Path]) -> DataProvider:
    if data_dir is None:
        return build_default_provider()
    settings = get_settings()
    directory = StationDataDirectory(
        root_path=data_dir,
        station_file=settings.station_file,
        inventory_file=settings.inventory_file,
        csv_extension=settings.csv_extension,
    )
    return DataProvider(
        directory=directory,
        cache=MeasurementCache(max_entries=settings.cache_size),
        aggregator=Aggregator(),
        malformed_lines=MalformedLinePolicy(settings.malformed_lines),
    )


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Directory with station files (defaults to GHCN_DATA_DIR env or ./data).",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to LOG_LEVEL env or INFO).",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging(level=log_level.upper() if log_level else None)
    ctx.obj = CLIState(provider=_build_provider(data_dir))


@app.command("nearby")
def nearby_command(
    ctx: typer.Context,
    latitude: float = typer.Argument(..., help="Latitude in decimal degrees."),
    longitude: float = typer.Argument(..., help="Longitude in decimal degrees."),
    radius: float = typer.Option(50.0, "--radius", "-r", help="Search radius in km."),
) -> None:
    """List stations near a point, nearest first."""
    state = _get_state(ctx)
    stations = state.provider.get_nearest_stations(latitude, longitude, radius)
    render_nearby(stations, radius)


@app.command("yearly")
def yearly_command(
    ctx: typer.Context,
    station_id: str = typer.Argument(..., help="GHCN station identifier."),
    start_year: int = typer.Argument(...),
    end_year: int = typer.Argument(...),
    element: MeasurementType = typer.Option(MeasurementType.TMAX, "--element", "-e"),
) -> None:
    """Yearly averages of an element."""
    state = _get_state(ctx)
    values = state.provider.get_yearly_averages(station_id, start_year, end_year, element)
    render_series(f"{element.value} yearly averages for {station_id}", "Year", element, values)


@app.command("month-range")
def month_range_command(
    ctx: typer.Context,
    station_id: str = typer.Argument(..., help="GHCN station identifier."),
    start_year: int = typer.Argument(...),
    end_year: int = typer.Argument(...),
    start_month: int = typer.Argument(..., help="First month of each window (1-12)."),
    end_month: int = typer.Argument(..., help="Last month of each window; may wrap past December."),
    element: MeasurementType = typer.Option(MeasurementType.TMAX, "--element", "-e"),
) -> None:
    """Per-year averages over a month range such as 12-2 for winter."""
    state = _get_state(ctx)
    try:
        values = state.provider.get_averages_for_month_range(
            station_id, start_year, end_year, start_month, end_month, element
        )
    except ValueError as exc:
        _fail(str(exc))
    render_series(
        f"{element.value} averages for months {start_month}-{end_month} at {station_id}",
        "Year",
        element,
        values,
    )


@app.command("monthly")
def monthly_command(
    ctx: typer.Context,
    station_id: str = typer.Argument(..., help="GHCN station identifier."),
    year: int = typer.Argument(...),
    element: MeasurementType = typer.Option(MeasurementType.TMAX, "--element", "-e"),
) -> None:
    """Monthly averages within a year."""
    state = _get_state(ctx)
    values = state.provider.get_monthly_averages(station_id, year, element)
    render_series(f"{element.value} monthly averages for {station_id} in {year}", "Month", element, values)


@app.command("daily")
def daily_command(
    ctx: typer.Context,
    station_id: str = typer.Argument(..., help="GHCN station identifier."),
    year: int = typer.Argument(...),
    month: int = typer.Argument(...),
    element: MeasurementType = typer.Option(MeasurementType.TMAX, "--element", "-e"),
) -> None:
    """Daily values within a month."""
    state = _get_state(ctx)
    try:
        values = state.provider.get_daily_values(station_id, year, month, element)
    except ValueError as exc:
        _fail(str(exc))
    render_series(
        f"{element.value} daily values for {station_id} in {year}-{month:02d}", "Day", element, values
    )
