"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from models.records import MeasurementType


class StationResponse(BaseModel):
    """Station metadata as listed in the station file."""

    station_id: str
    latitude: float
    longitude: float
    elevation: Optional[float] = Field(
        default=None, description="Metres above sea level; null when not recorded."
    )
    name: str


class NearbyStationResponse(BaseModel):
    station_id: str
    distance_km: float = Field(..., ge=0)


class NearbyStationsResponse(BaseModel):
    """Stations within the requested radius, nearest first."""

    latitude: float
    longitude: float
    radius_km: float
    stations: List[NearbyStationResponse] = Field(default_factory=list)


class SeriesResponse(BaseModel):
    """Ordered key -> value series for one station and element.

    Keys are years, months, or days depending on the query. An empty
    ``values`` mapping means the station has no matching data.
    """

    station_id: str
    element: MeasurementType
    values: Dict[int, float] = Field(default_factory=dict)
