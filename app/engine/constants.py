"""Calibration constants for the estimation engine.

The thresholds and factors here are empirical and carry no agronomic citation;
they live in one place so they can be recalibrated without touching the
algorithms that read them.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from dataclasses import dataclass

from app.models.enums import CropTypeEnum

# ── Climate defaults (temperate highland reference) ─────────────────────────

DEFAULT_TEMPERATURE = 24.0
DEFAULT_RAINFALL = 1000.0
DEFAULT_HUMIDITY = 70.0
DEFAULT_SOLAR_RADIATION = 20.0
DEFAULT_WIND_SPEED = 8.0

# ── Yield ───────────────────────────────────────────────────────────────────

BASE_YIELD_PER_ACRE: dict[CropTypeEnum, float] = {
	CropTypeEnum.maize: 2.5,
	CropTypeEnum.rice: 1.8,
	CropTypeEnum.beans: 0.9,
}


@dataclass(frozen=True, slots=True)
class YieldRule:
	"""Multiply yield by ``factor`` when ``feature <op> threshold`` holds."""

	feature: str
	op: Callable[[float, float], bool]
	threshold: float
	factor: float


HEURISTIC_YIELD_RULES: tuple[YieldRule, ...] = (
	YieldRule("temperature", operator.gt, 30.0, 0.9),
	YieldRule("rainfall", operator.lt, 500.0, 0.8),
	YieldRule("humidity", operator.gt, 80.0, 0.95),
)

# Ground truth for synthetic training samples.
TRAINING_YIELD_RULES: tuple[YieldRule, ...] = (
	YieldRule("temperature", operator.gt, 28.0, 0.9),
	YieldRule("temperature", operator.lt, 18.0, 0.85),
	YieldRule("rainfall", operator.lt, 600.0, 0.7),
	YieldRule("rainfall", operator.gt, 1200.0, 0.9),
	YieldRule("humidity", operator.gt, 85.0, 0.95),
	YieldRule("fertilizer_amount", operator.gt, 100.0, 1.1),
	YieldRule("solar_radiation", operator.gt, 20.0, 1.05),
)

RAINFALL_JITTER = 50.0
TEMPERATURE_JITTER = 2.5

# ── Synthetic training ranges (tropical highland, ~1700 m) ──────────────────

SYNTHETIC_RANGES: dict[str, tuple[float, float]] = {
	"temperature": (20.0, 30.0),
	"rainfall": (800.0, 1400.0),
	"humidity": (60.0, 90.0),
	"solar_radiation": (15.0, 25.0),
	"wind_speed": (5.0, 15.0),
	"field_size": (0.5, 5.0),
	"fertilizer_amount": (0.0, 200.0),
}
SYNTHETIC_YIELD_NOISE = (0.8, 1.2)
SEASONAL_TEMPERATURE_AMPLITUDE = 3.0
SEASONAL_RAINFALL_AMPLITUDE = 200.0
SEASONAL_TEMPERATURE_NOISE = 4.0
SEASONAL_RAINFALL_NOISE = 300.0
METRICS_EVALUATION_SIZE = 100

# ── Confidence ──────────────────────────────────────────────────────────────

BASE_CONFIDENCE = 0.7
MAX_CONFIDENCE = 0.95
OBSERVATION_TIERS: tuple[tuple[int, float], ...] = ((10, 0.1), (30, 0.1))
FERTILIZER_BONUS = 0.05
SEED_VARIETY_BONUS = 0.05
RECENT_PLANTING_MONTHS = 2
RECENT_PLANTING_BONUS = 0.1

# ── Advisory bands ──────────────────────────────────────────────────────────

OPTIMAL_RAINFALL = (800.0, 1200.0)
DROUGHT_RAINFALL = 600.0
WATERLOGGING_RAINFALL = 1400.0
FAVORABLE_TEMPERATURE = (18.0, 28.0)
HEAT_STRESS_TEMPERATURE = 30.0
COLD_STRESS_TEMPERATURE = 16.0

MAIZE_LOW_YIELD = 2.0
MAIZE_DISEASE_HUMIDITY = 80.0
RICE_WATER_RAINFALL = 1000.0
BEANS_SHADE_TEMPERATURE = 28.0
LOW_FERTILIZER_AMOUNT = 50.0
LOW_CONFIDENCE = 0.8

# ── Advisory text ───────────────────────────────────────────────────────────

OPTIMAL_RAINFALL_FACTOR = "Optimal rainfall expected for crop growth"
DROUGHT_RISK = "Below-average rainfall predicted - drought risk"
DROUGHT_RECOMMENDATIONS = (
	"Install drip irrigation system",
	"Apply mulch to conserve soil moisture",
)
WATERLOGGING_RISK = "Excessive rainfall predicted - waterlogging risk"
WATERLOGGING_RECOMMENDATIONS = (
	"Improve field drainage systems",
	"Consider raised bed cultivation",
)
FAVORABLE_TEMPERATURE_FACTOR = "Favorable temperature range for crop development"
HEAT_STRESS_RISK = "High temperatures may cause heat stress"
HEAT_STRESS_RECOMMENDATIONS = (
	"Provide shade during hottest parts of day",
	"Increase irrigation frequency",
)
COLD_STRESS_RISK = "Low temperatures may slow crop growth"
COLD_STRESS_RECOMMENDATIONS = ("Consider using row covers for protection",)

MAIZE_LOW_YIELD_RECOMMENDATIONS = (
	"Consider drought-resistant maize varieties like H516",
	"Apply nitrogen fertilizer at tasseling stage",
)
MAIZE_DISEASE_RECOMMENDATION = "Monitor for gray leaf spot disease"
RICE_WATER_RECOMMENDATION = "Ensure adequate water supply for rice paddies"
RICE_PHOSPHORUS_RECOMMENDATION = "Apply phosphorus fertilizer before transplanting"
BEANS_SHADE_RECOMMENDATION = "Plant beans in partial shade during hot season"
BEANS_INOCULATION_RECOMMENDATION = "Inoculate seeds with rhizobia bacteria"

LOW_FERTILIZER_RECOMMENDATION = "Consider increasing fertilizer application"
LOW_CONFIDENCE_RECOMMENDATION = "Collect more climate data for better predictions"
GENERAL_RECOMMENDATIONS = (
	"Monitor weather forecasts regularly",
	"Keep detailed records of crop performance",
)
