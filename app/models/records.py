"""Per-user records: crop plantings, climate observations and predictions."""

from __future__ import annotations

import datetime as dt
import uuid

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.config import EstimationStrategy
from app.models.base import StoredRecord
from app.models.enums import CropTypeEnum


class CropRecord(StoredRecord):
    """One planted field."""

    user_id: uuid.UUID
    crop_type: CropTypeEnum
    planting_date: dt.date
    expected_harvest_date: dt.date | None = None
    field_size: float = Field(gt=0)
    fertilizer_type: str = ""
    fertilizer_amount: float = Field(default=0.0, ge=0)
    seed_variety: str = ""
    irrigation_method: str = ""


class ClimateObservation(StoredRecord):
    """One dated weather measurement."""

    user_id: uuid.UUID
    date: dt.date
    temperature: float
    rainfall: float
    humidity: float
    wind_speed: float
    solar_radiation: float


class ClimateImpact(BaseModel):
    """Advisory lists as persisted with a prediction."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    positive: list[str] = Field(default_factory=list)
    negative: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class PredictionRecord(StoredRecord):
    """Append-only estimation result. ``confidence`` is a whole percentage."""

    user_id: uuid.UUID
    crop_data_id: uuid.UUID
    predicted_yield: float = Field(ge=0)
    predicted_rainfall: float = Field(ge=0)
    predicted_temperature: float
    climate_impact: ClimateImpact
    confidence: int = Field(ge=0, le=100)
    strategy: EstimationStrategy = EstimationStrategy.heuristic
