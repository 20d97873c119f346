"""Geocoding (Nominatim) and daily weather (Open-Meteo) lookups.

Both lookups return ``None`` for "not found" / "unavailable" rather than
raising; callers decide how to surface that.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

import httpx
import structlog

from app.config import Settings, get_settings

_logger = structlog.get_logger("mavuno.weather")

DAILY_VARIABLES = (
	"temperature_2m_max",
	"precipitation_sum",
	"wind_speed_10m_max",
	"shortwave_radiation_sum",
	"relative_humidity_2m_max",
)


@dataclass(frozen=True, slots=True)
class Coordinates:
	latitude: float
	longitude: float


@dataclass(frozen=True, slots=True)
class DailyWeather:
	temperature: float
	rainfall: float
	humidity: float
	wind_speed: float
	solar_radiation: float


def _first(daily: dict[str, Any], key: str) -> float:
	values = daily.get(key)
	if not isinstance(values, list) or not values or values[0] is None:
		return 0.0
	return float(values[0])


class WeatherClient:
	def __init__(
		self,
		settings: Settings | None = None,
		transport: httpx.AsyncBaseTransport | None = None,
	):
		self.settings = settings or get_settings()
		self.transport = transport

	def _client(self) -> httpx.AsyncClient:
		return httpx.AsyncClient(
			timeout=self.settings.external_timeout_seconds,
			transport=self.transport,
			headers={"user-agent": "mavuno/0.1"},
		)

	async def geocode(self, location: str) -> Coordinates | None:
		params = {"q": location, "format": "json", "limit": 1}
		try:
			async with self._client() as client:
				response = await client.get(self.settings.geocoding_url, params=params)
				response.raise_for_status()
				payload = response.json()
		except (httpx.HTTPError, ValueError) as exc:
			_logger.warning("geocoding_failed", location=location, error=str(exc))
			return None

		if not isinstance(payload, list) or not payload:
			return None
		try:
			return Coordinates(latitude=float(payload[0]["lat"]), longitude=float(payload[0]["lon"]))
		except (KeyError, TypeError, ValueError):
			return None

	async def daily_weather(self, coordinates: Coordinates, day: date) -> DailyWeather | None:
		params = {
			"latitude": coordinates.latitude,
			"longitude": coordinates.longitude,
			"start_date": day.isoformat(),
			"end_date": day.isoformat(),
			"daily": ",".join(DAILY_VARIABLES),
			"timezone": self.settings.weather_timezone,
		}
		try:
			async with self._client() as client:
				response = await client.get(self.settings.weather_url, params=params)
				response.raise_for_status()
				payload = response.json()
		except (httpx.HTTPError, ValueError) as exc:
			_logger.warning("weather_lookup_failed", day=day.isoformat(), error=str(exc))
			return None

		daily = payload.get("daily") if isinstance(payload, dict) else None
		if not isinstance(daily, dict) or not daily.get("temperature_2m_max"):
			return None

		return DailyWeather(
			temperature=_first(daily, "temperature_2m_max"),
			rainfall=_first(daily, "precipitation_sum"),
			humidity=_first(daily, "relative_humidity_2m_max"),
			wind_speed=_first(daily, "wind_speed_10m_max"),
			solar_radiation=_first(daily, "shortwave_radiation_sum"),
		)
