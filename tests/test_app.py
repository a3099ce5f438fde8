from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from conftest import FUERTH, STATION_ID, build_provider
from services.provider import DataProvider, build_default_provider


@pytest.fixture
def api_client(data_dir: Path, monkeypatch) -> Iterator[TestClient]:
    providers: list[DataProvider] = []

    def build_test_provider() -> DataProvider:
        if not providers:
            providers.append(build_provider(data_dir))
        return providers[0]

    build_test_provider.cache_clear = providers.clear  # type: ignore[attr-defined]

    monkeypatch.setattr("app.main.build_default_provider", build_test_provider)
    monkeypatch.setattr("app.api.build_default_provider", build_test_provider)

    app = create_app()
    with TestClient(app) as client:
        yield client


def test_lifespan_clears_cached_provider() -> None:
    app = create_app()

    with TestClient(app):
        provider_during = build_default_provider()

    provider_after = build_default_provider()
    try:
        assert provider_after is not provider_during
    finally:
        build_default_provider.cache_clear()


def test_healthcheck(api_client: TestClient) -> None:
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_nearby_stations(api_client: TestClient) -> None:
    latitude, longitude = FUERTH
    response = api_client.get(
        "/stations/nearby",
        params={"latitude": latitude, "longitude": longitude, "radius_km": 50},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["radius_km"] == 50
    assert payload["stations"][0]["station_id"] == "GME00122614"
    assert round(payload["stations"][0]["distance_km"], 1) == 2.2
    distances = [item["distance_km"] for item in payload["stations"]]
    assert distances == sorted(distances)


def test_station_metadata(api_client: TestClient) -> None:
    response = api_client.get("/stations/GME00122222")

    assert response.status_code == 200
    payload = response.json()
    assert payload["name"] == "ERLANGEN"
    assert payload["elevation"] is None


def test_unknown_station_metadata_returns_not_found(api_client: TestClient) -> None:
    response = api_client.get("/stations/GME00999999")

    assert response.status_code == 404
    assert "GME00999999" in response.json()["detail"]


def test_yearly_series(api_client: TestClient) -> None:
    response = api_client.get(
        f"/stations/{STATION_ID}/yearly",
        params={"start_year": 1999, "end_year": 2001, "element": "TMAX"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["element"] == "TMAX"
    assert list(payload["values"]) == ["1999", "2000", "2001"]
    assert payload["values"]["2000"] == pytest.approx(16.7)


def test_winter_season_series(api_client: TestClient) -> None:
    response = api_client.get(
        f"/stations/{STATION_ID}/seasons/winter",
        params={"start_year": 2000, "end_year": 2001},
    )

    assert response.status_code == 200
    values = response.json()["values"]
    assert values["2000"] == pytest.approx(1068 * 0.1 / 9)


def test_month_range_rejects_invalid_month(api_client: TestClient) -> None:
    response = api_client.get(
        f"/stations/{STATION_ID}/month-range",
        params={"start_year": 2000, "end_year": 2001, "start_month": 13, "end_month": 2},
    )

    assert response.status_code == 400
    assert "start_month" in response.json()["detail"]


def test_monthly_and_daily_series(api_client: TestClient) -> None:
    monthly = api_client.get(f"/stations/{STATION_ID}/monthly", params={"year": 2000}).json()
    daily = api_client.get(
        f"/stations/{STATION_ID}/daily", params={"year": 2000, "month": 12}
    ).json()

    assert monthly["values"]["12"] == pytest.approx(22.2)
    assert daily["values"] == pytest.approx({"1": 22.1, "2": 22.2, "3": 22.3})


def test_missing_data_returns_empty_series(api_client: TestClient) -> None:
    response = api_client.get(
        "/stations/GME00999999/yearly",
        params={"start_year": 1999, "end_year": 2001},
    )

    assert response.status_code == 200
    assert response.json()["values"] == {}


def test_nearby_stations_rejects_negative_radius(api_client: TestClient) -> None:
    latitude, longitude = FUERTH
    response = api_client.get(
        "/stations/nearby",
        params={"latitude": latitude, "longitude": longitude, "radius_km": -1},
    )

    assert response.status_code == 422
