"""Pydantic schemas for prediction endpoints."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.config import EstimationStrategy
from app.models.enums import CropTypeEnum


class PredictionRequest(BaseModel):
	crop_id: uuid.UUID | None = None


class ClimateImpactRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	positive: list[str] = Field(default_factory=list)
	negative: list[str] = Field(default_factory=list)
	recommendations: list[str] = Field(default_factory=list)


class PredictionRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: uuid.UUID
	user_id: uuid.UUID
	crop_data_id: uuid.UUID
	predicted_yield: float
	predicted_rainfall: float
	predicted_temperature: float
	climate_impact: ClimateImpactRead
	confidence: int = Field(ge=0, le=100)
	strategy: EstimationStrategy
	created_at: datetime


class PredictionListRead(BaseModel):
	items: list[PredictionRead]


class CropYieldSummary(BaseModel):
	crop_type: CropTypeEnum
	average_yield: float
	predictions: int


class PredictionSeriesPoint(BaseModel):
	label: str
	crop_data_id: uuid.UUID
	predicted_yield: float
	predicted_rainfall: float
	predicted_temperature: float
	confidence: int
	created_at: datetime


class PredictionSummary(BaseModel):
	total: int
	by_crop: list[CropYieldSummary] = Field(default_factory=list)
	series: list[PredictionSeriesPoint] = Field(default_factory=list)


class ModelMetricsRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	loss: float
	mae: float
	training_loss: float
	evaluated_samples: int
	training_samples: int
	last_training: datetime
