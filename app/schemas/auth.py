"""Pydantic request/response schemas for registration, login and profile."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
	username: str = Field(min_length=1, max_length=100)
	email: str = Field(default="", max_length=320)
	full_name: str = Field(default="", max_length=255)
	location: str = Field(default="", max_length=255)


class LoginRequest(BaseModel):
	username: str = Field(min_length=1, max_length=100)


class ProfileUpdate(BaseModel):
	email: str | None = Field(default=None, max_length=320)
	full_name: str | None = Field(default=None, max_length=255)
	location: str | None = Field(default=None, max_length=255)


class UserRead(BaseModel):
	model_config = ConfigDict(from_attributes=True)

	id: uuid.UUID
	username: str
	email: str
	full_name: str
	location: str
	created_at: datetime


class TokenResponse(BaseModel):
	access_token: str
	token_type: str = "bearer"
	user: UserRead


class UserStats(BaseModel):
	crop_records: int
	climate_observations: int
	predictions: int
