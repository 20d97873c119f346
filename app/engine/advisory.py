"""Advisory generation: positive factors, risk factors and recommendations.

Bands are closed on the favourable side: rainfall in [800, 1200] and
temperature in [18, 28] count as positive. The gaps [600, 800) and
(1200, 1400] for rainfall, and (28, 30] / [16, 18) for temperature,
produce no entry at all.

Lists are returned in rule order, without deduplication or truncation.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from app.engine import constants as c
from app.engine.climate import ClimateAggregate
from app.engine.estimate import Estimate
from app.models.enums import CropTypeEnum
from app.models.records import ClimateImpact, CropRecord


@dataclass(frozen=True, slots=True)
class AdvisoryReport:
	positive_factors: list[str] = field(default_factory=list)
	risk_factors: list[str] = field(default_factory=list)
	recommendations: list[str] = field(default_factory=list)

	def to_climate_impact(self) -> ClimateImpact:
		return ClimateImpact(
			positive=list(self.positive_factors),
			negative=list(self.risk_factors),
			recommendations=list(self.recommendations),
		)


def generate_advisory(estimate: Estimate, crop: CropRecord, climate: ClimateAggregate) -> AdvisoryReport:
	report = AdvisoryReport()
	_rainfall_band(estimate.rainfall_value, report)
	_temperature_band(estimate.temperature_value, report)
	_crop_rules(estimate, crop, climate, report)

	if crop.fertilizer_amount < c.LOW_FERTILIZER_AMOUNT:
		report.recommendations.append(c.LOW_FERTILIZER_RECOMMENDATION)
	if estimate.confidence < c.LOW_CONFIDENCE:
		report.recommendations.append(c.LOW_CONFIDENCE_RECOMMENDATION)
	report.recommendations.extend(c.GENERAL_RECOMMENDATIONS)
	return report


def _rainfall_band(rainfall: float, report: AdvisoryReport) -> None:
	low, high = c.OPTIMAL_RAINFALL
	if low <= rainfall <= high:
		report.positive_factors.append(c.OPTIMAL_RAINFALL_FACTOR)
	elif rainfall < c.DROUGHT_RAINFALL:
		report.risk_factors.append(c.DROUGHT_RISK)
		report.recommendations.extend(c.DROUGHT_RECOMMENDATIONS)
	elif rainfall > c.WATERLOGGING_RAINFALL:
		report.risk_factors.append(c.WATERLOGGING_RISK)
		report.recommendations.extend(c.WATERLOGGING_RECOMMENDATIONS)


def _temperature_band(temperature: float, report: AdvisoryReport) -> None:
	low, high = c.FAVORABLE_TEMPERATURE
	if low <= temperature <= high:
		report.positive_factors.append(c.FAVORABLE_TEMPERATURE_FACTOR)
	elif temperature > c.HEAT_STRESS_TEMPERATURE:
		report.risk_factors.append(c.HEAT_STRESS_RISK)
		report.recommendations.extend(c.HEAT_STRESS_RECOMMENDATIONS)
	elif temperature < c.COLD_STRESS_TEMPERATURE:
		report.risk_factors.append(c.COLD_STRESS_RISK)
		report.recommendations.extend(c.COLD_STRESS_RECOMMENDATIONS)


def _crop_rules(
	estimate: Estimate,
	crop: CropRecord,
	climate: ClimateAggregate,
	report: AdvisoryReport,
) -> None:
	if crop.crop_type == CropTypeEnum.maize:
		if estimate.yield_value < c.MAIZE_LOW_YIELD:
			report.recommendations.extend(c.MAIZE_LOW_YIELD_RECOMMENDATIONS)
		if climate.humidity > c.MAIZE_DISEASE_HUMIDITY:
			report.recommendations.append(c.MAIZE_DISEASE_RECOMMENDATION)
	elif crop.crop_type == CropTypeEnum.rice:
		if estimate.rainfall_value < c.RICE_WATER_RAINFALL:
			report.recommendations.append(c.RICE_WATER_RECOMMENDATION)
		report.recommendations.append(c.RICE_PHOSPHORUS_RECOMMENDATION)
	elif crop.crop_type == CropTypeEnum.beans:
		if estimate.temperature_value > c.BEANS_SHADE_TEMPERATURE:
			report.recommendations.append(c.BEANS_SHADE_RECOMMENDATION)
		report.recommendations.append(c.BEANS_INOCULATION_RECOMMENDATION)
