"""Point estimate produced by either estimation strategy."""

from __future__ import annotations

from dataclasses import dataclass

from app.engine import constants


@dataclass(frozen=True, slots=True)
class Estimate:
	yield_value: float
	rainfall_value: float
	temperature_value: float
	confidence: float

	@classmethod
	def bounded(
		cls,
		*,
		yield_value: float,
		rainfall_value: float,
		temperature_value: float,
		confidence: float,
	) -> Estimate:
		"""Build an estimate with yield/rainfall floored at zero and confidence in [0, max]."""
		return cls(
			yield_value=max(0.0, float(yield_value)),
			rainfall_value=max(0.0, float(rainfall_value)),
			temperature_value=float(temperature_value),
			confidence=max(0.0, min(constants.MAX_CONFIDENCE, float(confidence))),
		)

	@property
	def confidence_percent(self) -> int:
		return round(self.confidence * 100)
