"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.schemas import (
    NearbyStationResponse,
    NearbyStationsResponse,
    SeriesResponse,
    StationResponse,
)
from models.records import MeasurementType, Season
from services.provider import DataProvider, build_default_provider

router = APIRouter()


def get_provider() -> DataProvider:
    return build_default_provider()


def _series(station_id: str, element: MeasurementType, values: Dict[int, float]) -> SeriesResponse:
    return SeriesResponse(station_id=station_id, element=element, values=values)


def _bad_request(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/stations/nearby",
    response_model=NearbyStationsResponse,
    summary="Stations within a radius of a point, nearest first.",
)
def nearby_stations(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius_km: float = Query(50.0, ge=0),
    provider: DataProvider = Depends(get_provider),
) -> NearbyStationsResponse:
    nearby = provider.get_nearest_stations(latitude, longitude, radius_km)
    return NearbyStationsResponse(
        latitude=latitude,
        longitude=longitude,
        radius_km=radius_km,
        stations=[
            NearbyStationResponse(station_id=item.station_id, distance_km=item.distance_km)
            for item in nearby
        ],
    )


@router.get(
    "/stations/{station_id}",
    response_model=StationResponse,
    summary="Metadata for a single station.",
)
def get_station(
    station_id: str,
    provider: DataProvider = Depends(get_provider),
) -> StationResponse:
    station = provider.get_station(station_id)
    if station is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Station {station_id!r} not found.",
        )
    return StationResponse(
        station_id=station.station_id,
        latitude=station.latitude,
        longitude=station.longitude,
        elevation=station.elevation_m,
        name=station.name,
    )


@router.get(
    "/stations/{station_id}/yearly",
    response_model=SeriesResponse,
    summary="Yearly averages over a range of years.",
)
def yearly_averages(
    station_id: str,
    start_year: int = Query(...),
    end_year: int = Query(...),
    element: MeasurementType = Query(MeasurementType.TMAX),
    provider: DataProvider = Depends(get_provider),
) -> SeriesResponse:
    values = provider.get_yearly_averages(station_id, start_year, end_year, element)
    return _series(station_id, element, values)


@router.get(
    "/stations/{station_id}/month-range",
    response_model=SeriesResponse,
    summary="Per-year averages over a month range, which may wrap past December.",
)
def month_range_averages(
    station_id: str,
    start_year: int = Query(...),
    end_year: int = Query(...),
    start_month: int = Query(...),
    end_month: int = Query(...),
    element: MeasurementType = Query(MeasurementType.TMAX),
    provider: DataProvider = Depends(get_provider),
) -> SeriesResponse:
    try:
        values = provider.get_averages_for_month_range(
            station_id, start_year, end_year, start_month, end_month, element
        )
    except ValueError as exc:
        raise _bad_request(exc) from exc
    return _series(station_id, element, values)


@router.get(
    "/stations/{station_id}/seasons/{season}",
    response_model=SeriesResponse,
    summary="Per-year averages for a meteorological season.",
)
def seasonal_averages(
    station_id: str,
    season: Season,
    start_year: int = Query(...),
    end_year: int = Query(...),
    element: MeasurementType = Query(MeasurementType.TMAX),
    provider: DataProvider = Depends(get_provider),
) -> SeriesResponse:
    values = provider.get_seasonal_averages(station_id, start_year, end_year, season, element)
    return _series(station_id, element, values)


@router.get(
    "/stations/{station_id}/monthly",
    response_model=SeriesResponse,
    summary="Monthly averages within one year.",
)
def monthly_averages(
    station_id: str,
    year: int = Query(...),
    element: MeasurementType = Query(MeasurementType.TMAX),
    provider: DataProvider = Depends(get_provider),
) -> SeriesResponse:
    values = provider.get_monthly_averages(station_id, year, element)
    return _series(station_id, element, values)


@router.get(
    "/stations/{station_id}/daily",
    response_model=SeriesResponse,
    summary="Daily values within one month.",
)
def daily_values(
    station_id: str,
    year: int = Query(...),
    month: int = Query(...),
    element: MeasurementType = Query(MeasurementType.TMAX),
    provider: DataProvider = Depends(get_provider),
) -> SeriesResponse:
    try:
        values = provider.get_daily_values(station_id, year, month, element)
    except ValueError as exc:
        raise _bad_request(exc) from exc
    return _series(station_id, element, values)
