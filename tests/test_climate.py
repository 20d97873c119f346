from __future__ import annotations

from datetime import date
from typing import Any

import httpx
import pytest
from httpx import AsyncClient

from app.config import Settings
from app.errors import ExternalServiceUnavailableError
from app.main import app
from app.routes.climate import get_weather_client
from app.services.climate_service import ClimateService
from app.services.weather_client import WeatherClient
from app.storage import RecordStore

OBSERVATION = {
    "date": "2024-06-01",
    "temperature": 24.5,
    "rainfall": 12.0,
    "humidity": 68.0,
    "wind_speed": 9.0,
    "solar_radiation": 18.5,
}


def _weather_transport(seen: list[httpx.Request], *, geocode: Any = None, forecast: Any = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if "nominatim" in request.url.host:
            return httpx.Response(200, json=geocode if geocode is not None else [{"lat": "-8.9", "lon": "33.46"}])
        if forecast is None:
            return httpx.Response(502)
        return httpx.Response(200, json=forecast)

    return httpx.MockTransport(handler)


FORECAST = {
    "daily": {
        "time": ["2024-06-01"],
        "temperature_2m_max": [23.4],
        "precipitation_sum": [3.2],
        "wind_speed_10m_max": [14.0],
        "shortwave_radiation_sum": [19.7],
        "relative_humidity_2m_max": [88.0],
    }
}


async def test_create_and_list_sorted_by_date(client: AsyncClient) -> None:
    await client.post("/api/v1/climate", json={**OBSERVATION, "date": "2024-06-10"})
    await client.post("/api/v1/climate", json=OBSERVATION)

    response = await client.get("/api/v1/climate")

    assert response.status_code == 200
    assert [item["date"] for item in response.json()["items"]] == ["2024-06-01", "2024-06-10"]


async def test_update_and_delete_observation(client: AsyncClient) -> None:
    created = (await client.post("/api/v1/climate", json=OBSERVATION)).json()

    updated = await client.put(f"/api/v1/climate/{created['id']}", json={**OBSERVATION, "rainfall": 40.0})
    assert updated.status_code == 200
    assert updated.json()["rainfall"] == 40.0

    assert (await client.delete(f"/api/v1/climate/{created['id']}")).status_code == 400
    deleted = await client.delete(f"/api/v1/climate/{created['id']}", params={"confirm": "true"})
    assert deleted.status_code == 204


async def test_observation_validation(client: AsyncClient) -> None:
    response = await client.post("/api/v1/climate", json={**OBSERVATION, "humidity": 140})
    assert response.status_code == 422


async def test_lookup_prefills_observation(client: AsyncClient) -> None:
    seen: list[httpx.Request] = []
    weather_client = WeatherClient(Settings(), transport=_weather_transport(seen, forecast=FORECAST))
    app.dependency_overrides[get_weather_client] = lambda: weather_client

    response = await client.post("/api/v1/climate/lookup", json={"date": "2024-06-01"})

    assert response.status_code == 200
    assert response.json() == {
        "date": "2024-06-01",
        "temperature": 23.4,
        "rainfall": 3.2,
        "humidity": 88.0,
        "wind_speed": 14.0,
        "solar_radiation": 19.7,
    }
    assert seen[0].url.params["q"] == "Mbeya, Tanzania"
    assert seen[1].url.params["start_date"] == "2024-06-01"
    # lookup never persists
    assert (await client.get("/api/v1/climate")).json()["items"] == []


async def test_lookup_failure_maps_to_503(client: AsyncClient) -> None:
    weather_client = WeatherClient(Settings(), transport=_weather_transport([], forecast=None))
    app.dependency_overrides[get_weather_client] = lambda: weather_client

    response = await client.post("/api/v1/climate/lookup", json={"date": "2024-06-01", "location": "Iringa"})

    assert response.status_code == 503
    assert "retry" in response.json()["detail"]


async def test_lookup_unknown_location(store: RecordStore) -> None:
    weather_client = WeatherClient(Settings(), transport=_weather_transport([], geocode=[]))
    service = ClimateService(store, weather_client)

    with pytest.raises(ExternalServiceUnavailableError):
        await service.lookup(date(2024, 6, 1), "Atlantis")
