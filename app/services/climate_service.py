"""Climate observation CRUD and weather-lookup prefill service."""

from __future__ import annotations

import uuid
from datetime import date

from app.errors import ExternalServiceUnavailableError, NotFoundError
from app.models.records import ClimateObservation
from app.schemas.climate import ClimateObservationCreate
from app.services.weather_client import WeatherClient
from app.storage import RecordStore, climate_data_key


class ClimateService:
	def __init__(self, store: RecordStore, weather_client: WeatherClient | None = None):
		self.store = store
		self.weather_client = weather_client

	async def list_observations(self, user_id: uuid.UUID) -> list[ClimateObservation]:
		observations = await self.store.read_list(climate_data_key(user_id), ClimateObservation)
		return sorted(observations, key=lambda item: item.date)

	async def get_observation(self, user_id: uuid.UUID, observation_id: uuid.UUID) -> ClimateObservation:
		for observation in await self.list_observations(user_id):
			if observation.id == observation_id:
				return observation
		raise NotFoundError(f"Climate observation {observation_id} not found")

	async def create_observation(self, user_id: uuid.UUID, payload: ClimateObservationCreate) -> ClimateObservation:
		observation = ClimateObservation(user_id=user_id, **payload.model_dump())
		await self.store.append(climate_data_key(user_id), ClimateObservation, [observation])
		return observation

	async def update_observation(
		self,
		user_id: uuid.UUID,
		observation_id: uuid.UUID,
		payload: ClimateObservationCreate,
	) -> ClimateObservation:
		observations = await self.store.read_list(climate_data_key(user_id), ClimateObservation)
		for index, observation in enumerate(observations):
			if observation.id == observation_id:
				updated = observation.model_copy(update=payload.model_dump())
				observations[index] = updated
				await self.store.write_list(climate_data_key(user_id), observations)
				return updated
		raise NotFoundError(f"Climate observation {observation_id} not found")

	async def delete_observation(self, user_id: uuid.UUID, observation_id: uuid.UUID) -> None:
		observations = await self.store.read_list(climate_data_key(user_id), ClimateObservation)
		remaining = [item for item in observations if item.id != observation_id]
		if len(remaining) == len(observations):
			raise NotFoundError(f"Climate observation {observation_id} not found")
		await self.store.write_list(climate_data_key(user_id), remaining)

	async def lookup(self, day: date, location: str) -> ClimateObservationCreate:
		"""Pre-fill an observation from geocoding + daily weather. Nothing is stored."""
		if self.weather_client is None:
			raise ExternalServiceUnavailableError("weather lookup is not configured")

		coordinates = await self.weather_client.geocode(location)
		if coordinates is None:
			raise ExternalServiceUnavailableError(f"location {location!r} could not be geocoded")

		weather = await self.weather_client.daily_weather(coordinates, day)
		if weather is None:
			raise ExternalServiceUnavailableError(f"weather data unavailable for {day.isoformat()}")

		return ClimateObservationCreate(
			date=day,
			temperature=weather.temperature,
			rainfall=weather.rainfall,
			humidity=weather.humidity,
			wind_speed=weather.wind_speed,
			solar_radiation=weather.solar_radiation,
		)
