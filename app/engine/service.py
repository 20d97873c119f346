"""Estimation engine service: one-time initialization, estimates, advisories and metrics."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, datetime

import numpy as np
import structlog

from app.config import EstimationStrategy, Settings
from app.engine import constants
from app.engine.advisory import AdvisoryReport, generate_advisory
from app.engine.climate import ClimateAggregate, aggregate_climate
from app.engine.confidence import score_confidence
from app.engine.estimate import Estimate
from app.engine.heuristic import heuristic_estimate, validate_crop
from app.engine.learned import TrainedModels, evaluate_yield, predict_climate, predict_yield, train_models
from app.engine.synthetic import generate_training_data
from app.errors import EngineNotInitializedError
from app.models.records import ClimateObservation, CropRecord

_logger = structlog.get_logger("mavuno.engine")


@dataclass(frozen=True, slots=True)
class Assessment:
	climate: ClimateAggregate
	estimate: Estimate
	advisory: AdvisoryReport


@dataclass(frozen=True, slots=True)
class ModelMetrics:
	loss: float
	mae: float
	training_loss: float
	evaluated_samples: int
	training_samples: int
	last_training: datetime


class EstimationEngine:
	"""Turns a crop record plus climate observations into an estimate and advisory.

	``initialize()`` must complete before ``estimate()``/``assess()``; until then
	those raise ``EngineNotInitializedError``. Initialization is single-flight:
	concurrent callers await the same in-flight task and training runs once.
	Trained parameters are read-only afterwards.
	"""

	def __init__(
		self,
		strategy: EstimationStrategy = EstimationStrategy.heuristic,
		*,
		rng: np.random.Generator | None = None,
		jitter: bool = False,
		training_samples: int = 1000,
		training_timeout: float | None = None,
		clock: Callable[[], date] = date.today,
	):
		self.strategy = strategy
		self.jitter = jitter
		self.training_samples = training_samples
		self.training_timeout = training_timeout
		self._rng = rng if rng is not None else np.random.default_rng()
		self._clock = clock
		self._models: TrainedModels | None = None
		self._ready = False
		self._init_lock = asyncio.Lock()
		self._init_task: asyncio.Task[None] | None = None
		self._background_task: asyncio.Task[None] | None = None

	@classmethod
	def from_settings(cls, settings: Settings) -> EstimationEngine:
		return cls(
			settings.estimation_strategy,
			rng=np.random.default_rng(settings.training_seed),
			jitter=settings.estimation_jitter_enabled,
			training_samples=settings.training_samples,
			training_timeout=settings.engine_training_timeout_seconds,
		)

	@property
	def ready(self) -> bool:
		return self._ready

	async def initialize(self) -> bool:
		"""Run the one-time setup (training for the learned strategy) and report readiness."""
		if self._ready:
			return True

		async with self._init_lock:
			if self._init_task is None:
				self._init_task = asyncio.create_task(self._run_initialization())
			task = self._init_task

		try:
			await asyncio.wait_for(asyncio.shield(task), self.training_timeout)
		except TimeoutError as exc:
			raise EngineNotInitializedError("estimation engine setup did not finish in time") from exc
		return self._ready

	def initialize_in_background(self) -> asyncio.Task[None] | None:
		"""Start ``initialize()`` without awaiting it, unless the engine is ready or a start is pending.

		Failures are logged and leave the engine not ready; the next call starts
		a fresh attempt. Must be called from a running event loop.
		"""
		if self._ready:
			return None
		if self._background_task is not None and not self._background_task.done():
			return self._background_task
		self._background_task = asyncio.create_task(self._initialize_logged())
		return self._background_task

	async def _initialize_logged(self) -> None:
		try:
			await self.initialize()
		except EngineNotInitializedError as exc:
			_logger.warning("engine_initialization_failed", strategy=self.strategy.value, error=str(exc))

	async def _run_initialization(self) -> None:
		start = time.perf_counter()
		if self.strategy == EstimationStrategy.learned:
			try:
				self._models = await asyncio.to_thread(self._train)
			except Exception as exc:
				self._init_task = None
				_logger.exception("engine_training_failed", strategy=self.strategy.value, error=str(exc))
				raise EngineNotInitializedError(f"model training failed: {exc}") from exc

		self._ready = True
		_logger.info(
			"engine_ready",
			strategy=self.strategy.value,
			duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
		)

	def _train(self) -> TrainedModels:
		dataset = generate_training_data(self.training_samples, self._rng)
		return train_models(dataset, self._rng)

	def estimate(self, crop: CropRecord, observations: Sequence[ClimateObservation]) -> Estimate:
		return self.assess(crop, observations).estimate

	def assess(self, crop: CropRecord, observations: Sequence[ClimateObservation]) -> Assessment:
		if not self._ready:
			raise EngineNotInitializedError("estimation engine is not initialized")

		validate_crop(crop)
		climate = aggregate_climate(observations)
		today = self._clock()
		confidence = score_confidence(crop, len(observations), today)

		if self.strategy == EstimationStrategy.learned:
			estimate = self._learned_estimate(crop, climate, confidence, today)
		else:
			estimate = heuristic_estimate(crop, climate, confidence, self._rng if self.jitter else None)

		return Assessment(
			climate=climate,
			estimate=estimate,
			advisory=generate_advisory(estimate, crop, climate),
		)

	def _learned_estimate(
		self,
		crop: CropRecord,
		climate: ClimateAggregate,
		confidence: float,
		today: date,
	) -> Estimate:
		models = self._models
		if models is None:
			raise EngineNotInitializedError("estimation models are not trained")

		yield_value = predict_yield(
			models,
			[
				crop.crop_type.index,
				crop.field_size,
				climate.temperature,
				climate.rainfall,
				climate.humidity,
				climate.solar_radiation,
				climate.wind_speed,
				crop.fertilizer_amount,
			],
		)
		rainfall, temperature = predict_climate(
			models,
			[
				today.month - 1,
				climate.temperature,
				climate.rainfall,
				climate.humidity,
				climate.solar_radiation,
				climate.wind_speed,
			],
		)
		return Estimate.bounded(
			yield_value=yield_value,
			rainfall_value=rainfall,
			temperature_value=temperature,
			confidence=confidence,
		)

	def model_metrics(self) -> ModelMetrics | None:
		"""Evaluate the yield model on a freshly generated synthetic set.

		Returns None when no model has been trained (heuristic strategy, or
		before initialization).
		"""
		models = self._models
		if models is None:
			return None

		dataset = generate_training_data(constants.METRICS_EVALUATION_SIZE, self._rng)
		loss, mae = evaluate_yield(models, dataset, constants.METRICS_EVALUATION_SIZE)
		return ModelMetrics(
			loss=loss,
			mae=mae,
			training_loss=models.training_loss,
			evaluated_samples=len(dataset),
			training_samples=models.training_samples,
			last_training=models.trained_at,
		)
