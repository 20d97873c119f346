"""Yield prediction generation, history, summary and model-metrics routes."""

from __future__ import annotations

import asyncio

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from app.auth.dependencies import get_current_user, get_engine, get_store
from app.auth.models import User
from app.engine.service import EstimationEngine
from app.errors import EngineNotInitializedError
from app.schemas.prediction import (
	ModelMetricsRead,
	PredictionListRead,
	PredictionRead,
	PredictionRequest,
	PredictionSummary,
)
from app.services.prediction_service import PredictionService
from app.storage import RecordStore

router = APIRouter(prefix="/predictions", tags=["predictions"])

_logger = structlog.get_logger("mavuno.predictions")


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, EngineNotInitializedError):
		return HTTPException(
			status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
			detail="Prediction model is still warming up, please retry shortly",
		)
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	_logger.error("prediction_service_failed", error=str(exc), error_type=type(exc).__name__)
	return HTTPException(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		detail="Unexpected prediction service failure",
	)


@router.post("", response_model=PredictionListRead, status_code=status.HTTP_201_CREATED)
async def generate_predictions(
	payload: PredictionRequest | None = None,
	store: RecordStore = Depends(get_store),
	engine: EstimationEngine = Depends(get_engine),
	current_user: User = Depends(get_current_user),
) -> PredictionListRead:
	crop_id = payload.crop_id if payload is not None else None
	try:
		predictions = await PredictionService(store, engine).generate(current_user.id, crop_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return PredictionListRead(items=[PredictionRead.model_validate(item) for item in predictions])


@router.get("", response_model=PredictionListRead)
async def list_predictions(
	store: RecordStore = Depends(get_store),
	engine: EstimationEngine = Depends(get_engine),
	current_user: User = Depends(get_current_user),
) -> PredictionListRead:
	try:
		predictions = await PredictionService(store, engine).list_predictions(current_user.id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return PredictionListRead(items=[PredictionRead.model_validate(item) for item in predictions])


@router.get("/summary", response_model=PredictionSummary)
async def prediction_summary(
	store: RecordStore = Depends(get_store),
	engine: EstimationEngine = Depends(get_engine),
	current_user: User = Depends(get_current_user),
) -> PredictionSummary:
	try:
		return await PredictionService(store, engine).summary(current_user.id)
	except Exception as exc:
		raise _map_error(exc) from exc


@router.get("/metrics", response_model=ModelMetricsRead | None)
async def model_metrics(
	engine: EstimationEngine = Depends(get_engine),
	_user: User = Depends(get_current_user),
) -> ModelMetricsRead | None:
	"""Evaluation of the learned yield model; ``null`` when none has been trained."""
	try:
		metrics = await asyncio.to_thread(engine.model_metrics)
	except Exception as exc:
		raise _map_error(exc) from exc
	if metrics is None:
		return None
	return ModelMetricsRead.model_validate(metrics)
