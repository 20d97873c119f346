"""Prediction generation, history and chart summary service."""

from __future__ import annotations

import time
import uuid
from collections import defaultdict

import structlog

from app.engine.service import EstimationEngine
from app.errors import EngineNotInitializedError, InvalidInputError, NotFoundError
from app.models.enums import CropTypeEnum
from app.models.records import ClimateObservation, CropRecord, PredictionRecord
from app.schemas.prediction import CropYieldSummary, PredictionSeriesPoint, PredictionSummary
from app.storage import RecordStore, climate_data_key, crop_data_key, predictions_key

_logger = structlog.get_logger("mavuno.predictions")


class PredictionService:
	def __init__(self, store: RecordStore, engine: EstimationEngine):
		self.store = store
		self.engine = engine

	async def list_predictions(self, user_id: uuid.UUID) -> list[PredictionRecord]:
		return await self.store.read_list(predictions_key(user_id), PredictionRecord)

	async def generate(self, user_id: uuid.UUID, crop_id: uuid.UUID | None = None) -> list[PredictionRecord]:
		"""Estimate every crop (or only ``crop_id``) against all of the user's observations.

		New records are appended to the user's history and returned.
		"""
		if not self.engine.ready:
			# restarts a failed or never-started setup; no-op while one is running
			self.engine.initialize_in_background()
			raise EngineNotInitializedError("estimation engine is still initializing")

		crops = await self.store.read_list(crop_data_key(user_id), CropRecord)
		if crop_id is not None:
			crops = [crop for crop in crops if crop.id == crop_id]
			if not crops:
				raise NotFoundError(f"Crop record {crop_id} not found")
		if not crops:
			raise InvalidInputError("add at least one crop record before requesting predictions")

		observations = await self.store.read_list(climate_data_key(user_id), ClimateObservation)

		start = time.perf_counter()
		created: list[PredictionRecord] = []
		for crop in crops:
			assessment = self.engine.assess(crop, observations)
			created.append(
				PredictionRecord(
					user_id=user_id,
					crop_data_id=crop.id,
					predicted_yield=assessment.estimate.yield_value,
					predicted_rainfall=assessment.estimate.rainfall_value,
					predicted_temperature=assessment.estimate.temperature_value,
					climate_impact=assessment.advisory.to_climate_impact(),
					confidence=assessment.estimate.confidence_percent,
					strategy=self.engine.strategy,
				)
			)

		await self.store.append(predictions_key(user_id), PredictionRecord, created)
		_logger.info(
			"predictions_generated",
			user_id=str(user_id),
			count=len(created),
			observations=len(observations),
			strategy=self.engine.strategy.value,
			duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
		)
		return created

	async def summary(self, user_id: uuid.UUID) -> PredictionSummary:
		predictions = await self.list_predictions(user_id)
		crops = {
			crop.id: crop
			for crop in await self.store.read_list(crop_data_key(user_id), CropRecord)
		}

		totals: dict[CropTypeEnum, list[float]] = defaultdict(list)
		series: list[PredictionSeriesPoint] = []
		for index, prediction in enumerate(predictions, start=1):
			crop = crops.get(prediction.crop_data_id)
			if crop is not None:
				totals[crop.crop_type].append(prediction.predicted_yield)
			series.append(
				PredictionSeriesPoint(
					label=f"P{index}",
					crop_data_id=prediction.crop_data_id,
					predicted_yield=prediction.predicted_yield,
					predicted_rainfall=prediction.predicted_rainfall,
					predicted_temperature=prediction.predicted_temperature,
					confidence=prediction.confidence,
					created_at=prediction.created_at,
				)
			)

		by_crop = [
			CropYieldSummary(
				crop_type=crop_type,
				average_yield=sum(values) / len(values),
				predictions=len(values),
			)
			for crop_type, values in sorted(totals.items(), key=lambda item: item[0].index)
		]
		return PredictionSummary(total=len(predictions), by_crop=by_crop, series=series)
