"""Pydantic request/response schemas for climate observations."""

from __future__ import annotations

import datetime as dt
import uuid

from pydantic import BaseModel, ConfigDict, Field


class ClimateObservationCreate(BaseModel):
	model_config = ConfigDict(allow_inf_nan=False)

	date: dt.date
	temperature: float
	rainfall: float = Field(ge=0)
	humidity: float = Field(ge=0, le=100)
	wind_speed: float = Field(ge=0)
	solar_radiation: float = Field(ge=0)


class ClimateLookupRequest(BaseModel):
	date: dt.date
	location: str | None = Field(default=None, min_length=1, max_length=255)


class ClimateRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: uuid.UUID
	user_id: uuid.UUID
	date: dt.date
	temperature: float
	rainfall: float
	humidity: float
	wind_speed: float
	solar_radiation: float
	created_at: dt.datetime


class ClimateListRead(BaseModel):
	items: list[ClimateRead]
