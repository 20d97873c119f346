"""Heuristic confidence score. A data-quality indicator, not a probability."""

from __future__ import annotations

from datetime import date

from app.engine import constants
from app.models.records import CropRecord


def score_confidence(crop: CropRecord, observation_count: int, today: date) -> float:
	confidence = constants.BASE_CONFIDENCE

	for minimum, bonus in constants.OBSERVATION_TIERS:
		if observation_count >= minimum:
			confidence += bonus
	if crop.fertilizer_amount > 0:
		confidence += constants.FERTILIZER_BONUS
	if crop.seed_variety:
		confidence += constants.SEED_VARIETY_BONUS

	# calendar months, no wrap across the year boundary
	if abs(today.month - crop.planting_date.month) <= constants.RECENT_PLANTING_MONTHS:
		confidence += constants.RECENT_PLANTING_BONUS

	# rounding keeps sums like 0.7 + 0.1 from landing just under 0.8
	return round(min(constants.MAX_CONFIDENCE, confidence), 4)
