"""Deterministic yield heuristic: base yield × rule multipliers × field size."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

import numpy as np

from app.engine import constants
from app.engine.climate import ClimateAggregate
from app.engine.constants import YieldRule
from app.engine.estimate import Estimate
from app.errors import InvalidInputError
from app.models.enums import CropTypeEnum
from app.models.records import CropRecord

BASE_YIELD_LOOKUP: Mapping[CropTypeEnum, float] = constants.BASE_YIELD_PER_ACRE


def validate_crop(crop: CropRecord) -> None:
	field_size = getattr(crop, "field_size", None)
	fertilizer = getattr(crop, "fertilizer_amount", None)
	if field_size is None or not math.isfinite(field_size) or field_size <= 0:
		raise InvalidInputError("crop record requires a positive field_size")
	if fertilizer is None or not math.isfinite(fertilizer) or fertilizer < 0:
		raise InvalidInputError("crop record requires a non-negative fertilizer_amount")
	if getattr(crop, "crop_type", None) not in BASE_YIELD_LOOKUP:
		raise InvalidInputError("crop record has an unknown crop_type")


def yield_multiplier(features: Mapping[str, Any], rules: Iterable[YieldRule]) -> Any:
	"""Product of the factors of every rule that holds.

	Works elementwise when ``features`` holds numpy arrays.
	"""
	multiplier: Any = 1.0
	for rule in rules:
		holds = rule.op(features[rule.feature], rule.threshold)
		multiplier = multiplier * np.where(holds, rule.factor, 1.0)
	return multiplier


def base_yield(
	crop_type: CropTypeEnum,
	field_size: float,
	features: dict[str, float],
	rules: Iterable[YieldRule] = constants.HEURISTIC_YIELD_RULES,
) -> float:
	return float(BASE_YIELD_LOOKUP[crop_type] * yield_multiplier(features, rules) * field_size)


def heuristic_estimate(
	crop: CropRecord,
	climate: ClimateAggregate,
	confidence: float,
	rng: np.random.Generator | None = None,
) -> Estimate:
	"""Estimate yield from the rule chain; rainfall/temperature echo the aggregate.

	When ``rng`` is given, rainfall and temperature receive bounded uniform
	jitter. Without it the result is fully deterministic.
	"""
	validate_crop(crop)
	features = {**climate.as_dict(), "fertilizer_amount": crop.fertilizer_amount}
	yield_value = base_yield(crop.crop_type, crop.field_size, features)

	rainfall = climate.rainfall
	temperature = climate.temperature
	if rng is not None:
		rainfall += rng.uniform(-constants.RAINFALL_JITTER, constants.RAINFALL_JITTER)
		temperature += rng.uniform(-constants.TEMPERATURE_JITTER, constants.TEMPERATURE_JITTER)

	return Estimate.bounded(
		yield_value=yield_value,
		rainfall_value=rainfall,
		temperature_value=temperature,
		confidence=confidence,
	)
