"""Pydantic schemas for text-generation insights and user settings."""

from __future__ import annotations

import uuid

from pydantic import BaseModel, Field

from app.models.enums import CropTypeEnum, LanguageEnum


class WeatherInsight(BaseModel):
	summary: str
	recommendations: list[str] = Field(default_factory=list)
	risk_factors: list[str] = Field(default_factory=list)


class InsightsResponse(BaseModel):
	crop_id: uuid.UUID
	crop_type: CropTypeEnum
	location: str
	insight: WeatherInsight
	optimization_advice: list[str] = Field(default_factory=list)


class LanguageSetting(BaseModel):
	language: LanguageEnum
