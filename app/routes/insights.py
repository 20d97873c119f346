"""Text-generation weather insight and optimization advice routes."""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from app.auth.dependencies import get_current_user, get_engine, get_store
from app.auth.models import User
from app.config import get_settings
from app.engine.climate import aggregate_climate
from app.engine.heuristic import base_yield
from app.engine.service import EstimationEngine
from app.schemas.insights import InsightsResponse
from app.services.climate_service import ClimateService
from app.services.crop_service import CropService
from app.services.insights_service import InsightsService
from app.storage import RecordStore

router = APIRouter(prefix="/insights", tags=["insights"])

_logger = structlog.get_logger("mavuno.insights")


def get_insights_service() -> InsightsService:
	return InsightsService()


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	_logger.error("insights_failed", error=str(exc), error_type=type(exc).__name__)
	return HTTPException(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		detail="Unexpected insights failure",
	)


@router.get("/{crop_id}", response_model=InsightsResponse)
async def crop_insights(
	crop_id: uuid.UUID,
	store: RecordStore = Depends(get_store),
	engine: EstimationEngine = Depends(get_engine),
	insights: InsightsService = Depends(get_insights_service),
	current_user: User = Depends(get_current_user),
) -> InsightsResponse:
	location = current_user.location or get_settings().default_location
	try:
		crop = await CropService(store).get_crop(current_user.id, crop_id)
		observations = await ClimateService(store).list_observations(current_user.id)
		climate = aggregate_climate(observations)
		if engine.ready:
			predicted_yield = engine.estimate(crop, observations).yield_value
		else:
			predicted_yield = base_yield(crop.crop_type, crop.field_size, climate.as_dict())
	except Exception as exc:
		raise _map_error(exc) from exc

	insight = await insights.weather_insight(crop.crop_type, location, climate)
	advice = await insights.optimization_advice(crop.crop_type, predicted_yield, crop.field_size)
	return InsightsResponse(
		crop_id=crop.id,
		crop_type=crop.crop_type,
		location=location,
		insight=insight,
		optimization_advice=advice,
	)
