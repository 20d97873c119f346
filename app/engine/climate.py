"""Climate aggregation: per-field mean of observations, with a reference fallback."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import asdict, dataclass

from app.engine import constants
from app.errors import InvalidInputError
from app.models.records import ClimateObservation

CLIMATE_FIELDS = ("temperature", "rainfall", "humidity", "solar_radiation", "wind_speed")


@dataclass(frozen=True, slots=True)
class ClimateAggregate:
	temperature: float
	rainfall: float
	humidity: float
	solar_radiation: float
	wind_speed: float

	def as_dict(self) -> dict[str, float]:
		return asdict(self)


DEFAULT_CLIMATE = ClimateAggregate(
	temperature=constants.DEFAULT_TEMPERATURE,
	rainfall=constants.DEFAULT_RAINFALL,
	humidity=constants.DEFAULT_HUMIDITY,
	solar_radiation=constants.DEFAULT_SOLAR_RADIATION,
	wind_speed=constants.DEFAULT_WIND_SPEED,
)


def aggregate_climate(observations: Sequence[ClimateObservation]) -> ClimateAggregate:
	"""Average every climate field; an empty collection yields ``DEFAULT_CLIMATE``."""
	if not observations:
		return DEFAULT_CLIMATE

	totals = dict.fromkeys(CLIMATE_FIELDS, 0.0)
	for observation in observations:
		for name in CLIMATE_FIELDS:
			value = getattr(observation, name, None)
			if value is None or not math.isfinite(float(value)):
				raise InvalidInputError(f"climate observation has no usable {name}")
			totals[name] += float(value)

	count = len(observations)
	return ClimateAggregate(**{name: total / count for name, total in totals.items()})
