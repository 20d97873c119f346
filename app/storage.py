"""Flat key-value record store backed by Redis.

Key layout (one JSON value per key):

- ``users``                  list of user records
- ``currentUser``            active session record, overwritten on login/logout
- ``cropData_{userId}``      list of crop records
- ``climateData_{userId}``   list of climate observations
- ``predictions_{userId}``   list of prediction records
- ``language``               two-letter locale code
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Sequence
from typing import Any, TypeVar

from redis.asyncio import Redis

from app.models.base import StoredRecord

RecordT = TypeVar("RecordT", bound=StoredRecord)

USERS_KEY = "users"
CURRENT_USER_KEY = "currentUser"
LANGUAGE_KEY = "language"


def crop_data_key(user_id: uuid.UUID) -> str:
	return f"cropData_{user_id}"


def climate_data_key(user_id: uuid.UUID) -> str:
	return f"climateData_{user_id}"


def predictions_key(user_id: uuid.UUID) -> str:
	return f"predictions_{user_id}"


class RecordStore:
	"""JSON read/write helpers over a Redis client with ``decode_responses=True``."""

	def __init__(self, redis_client: Redis):
		self.redis_client = redis_client

	async def read_json(self, key: str) -> Any | None:
		raw = await self.redis_client.get(key)
		if raw is None:
			return None
		return json.loads(raw)

	async def write_json(self, key: str, value: Any) -> None:
		await self.redis_client.set(key, json.dumps(value))

	async def delete(self, key: str) -> None:
		await self.redis_client.delete(key)

	async def read_record(self, key: str, model: type[RecordT]) -> RecordT | None:
		payload = await self.read_json(key)
		if payload is None:
			return None
		return model.model_validate(payload)

	async def write_record(self, key: str, record: StoredRecord) -> None:
		await self.write_json(key, record.to_storage())

	async def read_list(self, key: str, model: type[RecordT]) -> list[RecordT]:
		payload = await self.read_json(key)
		if not payload:
			return []
		return [model.model_validate(item) for item in payload]

	async def write_list(self, key: str, records: Sequence[StoredRecord]) -> None:
		await self.write_json(key, [record.to_storage() for record in records])

	async def append(self, key: str, model: type[RecordT], records: Sequence[RecordT]) -> list[RecordT]:
		existing = await self.read_list(key, model)
		updated = [*existing, *records]
		await self.write_list(key, updated)
		return updated
