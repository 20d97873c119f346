"""Synthetic training data for the learned estimation strategy.

Samples are drawn from fixed tropical-highland ranges. Yield ground truth
is the rule-chain yield (``TRAINING_YIELD_RULES``) scaled by field size and
a ±20% noise factor; next-period climate follows a sinusoidal seasonal
model over the calendar month plus bounded noise.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from app.engine import constants
from app.engine.heuristic import yield_multiplier
from app.models.enums import CropTypeEnum

YIELD_FEATURES = (
	"crop_index",
	"field_size",
	"temperature",
	"rainfall",
	"humidity",
	"solar_radiation",
	"wind_speed",
	"fertilizer_amount",
)
CLIMATE_FEATURES = (
	"month",
	"temperature",
	"rainfall",
	"humidity",
	"solar_radiation",
	"wind_speed",
)
CLIMATE_TARGETS = ("rainfall", "temperature")


@dataclass(frozen=True, slots=True)
class SyntheticDataset:
	yield_inputs: np.ndarray
	yield_outputs: np.ndarray
	climate_inputs: np.ndarray
	climate_outputs: np.ndarray

	def __len__(self) -> int:
		return int(self.yield_inputs.shape[0])


def seasonal_shift(month: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
	"""Temperature and rainfall offsets for 0-based calendar months."""
	phase = (month / 12.0) * 2.0 * np.pi
	return (
		np.sin(phase) * constants.SEASONAL_TEMPERATURE_AMPLITUDE,
		np.cos(phase) * constants.SEASONAL_RAINFALL_AMPLITUDE,
	)


def generate_training_data(samples: int, rng: np.random.Generator) -> SyntheticDataset:
	if samples <= 0:
		raise ValueError("samples must be positive")

	draws = {
		name: rng.uniform(low, high, samples)
		for name, (low, high) in constants.SYNTHETIC_RANGES.items()
	}
	crop_index = rng.integers(0, len(CropTypeEnum), samples)
	draws["crop_index"] = crop_index.astype(float)

	base_yields = np.array([constants.BASE_YIELD_PER_ACRE[crop] for crop in CropTypeEnum])
	multiplier = yield_multiplier(draws, constants.TRAINING_YIELD_RULES)
	noise_low, noise_high = constants.SYNTHETIC_YIELD_NOISE
	yields = (
		base_yields[crop_index]
		* multiplier
		* draws["field_size"]
		* rng.uniform(noise_low, noise_high, samples)
	)

	draws["month"] = rng.integers(0, 12, samples).astype(float)
	temperature_shift, rainfall_shift = seasonal_shift(draws["month"])
	next_temperature = (
		draws["temperature"]
		+ temperature_shift
		+ (rng.random(samples) - 0.5) * constants.SEASONAL_TEMPERATURE_NOISE
	)
	next_rainfall = np.maximum(
		0.0,
		draws["rainfall"]
		+ rainfall_shift
		+ (rng.random(samples) - 0.5) * constants.SEASONAL_RAINFALL_NOISE,
	)

	return SyntheticDataset(
		yield_inputs=np.column_stack([draws[name] for name in YIELD_FEATURES]),
		yield_outputs=yields,
		climate_inputs=np.column_stack([draws[name] for name in CLIMATE_FEATURES]),
		climate_outputs=np.column_stack([next_rainfall, next_temperature]),
	)
