"""Climate observation CRUD and weather-lookup routes."""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.auth.dependencies import get_current_user, get_store
from app.auth.models import User
from app.config import get_settings
from app.errors import ExternalServiceUnavailableError
from app.schemas.climate import (
	ClimateListRead,
	ClimateLookupRequest,
	ClimateObservationCreate,
	ClimateRead,
)
from app.services.climate_service import ClimateService
from app.services.weather_client import WeatherClient
from app.storage import RecordStore

router = APIRouter(prefix="/climate", tags=["climate"])

_logger = structlog.get_logger("mavuno.climate")


def get_weather_client() -> WeatherClient:
	return WeatherClient()


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, ExternalServiceUnavailableError):
		return HTTPException(
			status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
			detail="Weather data is temporarily unavailable, please retry later or enter values manually",
		)
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	_logger.error("climate_service_failed", error=str(exc), error_type=type(exc).__name__)
	return HTTPException(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		detail="Unexpected climate service failure",
	)


@router.post("", response_model=ClimateRead, status_code=status.HTTP_201_CREATED)
async def create_observation(
	payload: ClimateObservationCreate,
	store: RecordStore = Depends(get_store),
	current_user: User = Depends(get_current_user),
) -> ClimateRead:
	try:
		observation = await ClimateService(store).create_observation(current_user.id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return ClimateRead.model_validate(observation)


@router.get("", response_model=ClimateListRead)
async def list_observations(
	store: RecordStore = Depends(get_store),
	current_user: User = Depends(get_current_user),
) -> ClimateListRead:
	try:
		observations = await ClimateService(store).list_observations(current_user.id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return ClimateListRead(items=[ClimateRead.model_validate(item) for item in observations])


@router.post("/lookup", response_model=ClimateObservationCreate)
async def lookup_weather(
	payload: ClimateLookupRequest,
	store: RecordStore = Depends(get_store),
	weather_client: WeatherClient = Depends(get_weather_client),
	current_user: User = Depends(get_current_user),
) -> ClimateObservationCreate:
	location = payload.location or current_user.location or get_settings().default_location
	try:
		return await ClimateService(store, weather_client).lookup(payload.date, location)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.get("/{observation_id}", response_model=ClimateRead)
async def get_observation(
	observation_id: uuid.UUID,
	store: RecordStore = Depends(get_store),
	current_user: User = Depends(get_current_user),
) -> ClimateRead:
	try:
		observation = await ClimateService(store).get_observation(current_user.id, observation_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return ClimateRead.model_validate(observation)


@router.put("/{observation_id}", response_model=ClimateRead)
async def update_observation(
	observation_id: uuid.UUID,
	payload: ClimateObservationCreate,
	store: RecordStore = Depends(get_store),
	current_user: User = Depends(get_current_user),
) -> ClimateRead:
	try:
		observation = await ClimateService(store).update_observation(current_user.id, observation_id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return ClimateRead.model_validate(observation)


@router.delete("/{observation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_observation(
	observation_id: uuid.UUID,
	confirm: bool = Query(default=False),
	store: RecordStore = Depends(get_store),
	current_user: User = Depends(get_current_user),
) -> Response:
	if not confirm:
		raise HTTPException(
			status_code=status.HTTP_400_BAD_REQUEST,
			detail="Deleting a climate observation requires confirm=true",
		)
	try:
		await ClimateService(store).delete_observation(current_user.id, observation_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return Response(status_code=status.HTTP_204_NO_CONTENT)
