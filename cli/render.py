from __future__ import annotations

from typing import Dict, Iterable

import typer

from models.records import MeasurementType
from services.stations import NearbyStation

_UNITS = {
    MeasurementType.TMAX: "°C",
    MeasurementType.TMIN: "°C",
    MeasurementType.PRCP: "mm",
    MeasurementType.SNOW: "mm",
    MeasurementType.SNWD: "mm",
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def render_series(
    title: str,
    key_label: str,
    element: MeasurementType,
    values: Dict[int, float],
) -> None:
    echo_heading(title)
    if not values:
        typer.echo("No data available.")
        return
    unit = _UNITS.get(element, "")
    for key, value in values.items():
        typer.echo(f"{key_label} {key}: {value:>+7.1f} {unit}".rstrip())


def render_nearby(stations: Iterable[NearbyStation], radius_km: float) -> None:
    echo_heading(f"Stations within {radius_km:g} km")
    rows = list(stations)
    if not rows:
        typer.echo("No stations found.")
        return
    for row in rows:
        typer.echo(f"  - {row.station_id}: {row.distance_km:.1f} km")
