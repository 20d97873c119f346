"""Pydantic request/response schemas for crop records."""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.models.enums import CropTypeEnum


class CropCreate(BaseModel):
	model_config = ConfigDict(allow_inf_nan=False)

	crop_type: CropTypeEnum
	planting_date: date
	expected_harvest_date: date | None = None
	field_size: float = Field(gt=0)
	fertilizer_type: str = Field(default="", max_length=100)
	fertilizer_amount: float = Field(default=0.0, ge=0)
	seed_variety: str = Field(default="", max_length=100)
	irrigation_method: str = Field(default="", max_length=100)

	@model_validator(mode="after")
	def _validate_harvest_date(self) -> "CropCreate":
		if self.expected_harvest_date is not None and self.expected_harvest_date < self.planting_date:
			raise ValueError("expected_harvest_date must not precede planting_date")
		return self


class CropRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: uuid.UUID
	user_id: uuid.UUID
	crop_type: CropTypeEnum
	planting_date: date
	expected_harvest_date: date | None = None
	field_size: float
	fertilizer_type: str
	fertilizer_amount: float
	seed_variety: str
	irrigation_method: str
	created_at: datetime


class CropListRead(BaseModel):
	items: list[CropRead]
