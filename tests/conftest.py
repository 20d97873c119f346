"""Shared pytest fixtures: async test client, dict-backed Redis, ready estimation engine."""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import date
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from app.auth.dependencies import get_current_user
from app.auth.jwt import create_access_token
from app.auth.models import User
from app.engine.service import EstimationEngine
from app.main import app
from app.models.enums import CropTypeEnum
from app.models.records import ClimateObservation, CropRecord
from app.storage import USERS_KEY, RecordStore

TODAY = date(2024, 7, 15)


class FakeRedis:
	"""In-memory stand-in for the few string commands the record store uses."""

	def __init__(self) -> None:
		self.data: dict[str, str] = {}

	async def get(self, key: str) -> str | None:
		return self.data.get(key)

	async def set(self, key: str, value: str) -> bool:
		self.data[key] = value
		return True

	async def delete(self, *keys: str) -> int:
		removed = 0
		for key in keys:
			if self.data.pop(key, None) is not None:
				removed += 1
		return removed

	async def ping(self) -> bool:
		return True

	async def aclose(self) -> None:
		return None


@pytest.fixture
def fake_redis() -> FakeRedis:
	return FakeRedis()


@pytest.fixture
def store(fake_redis: FakeRedis) -> RecordStore:
	return RecordStore(fake_redis)  # type: ignore[arg-type]


@pytest.fixture
async def engine() -> EstimationEngine:
	"""Heuristic engine, no jitter, fixed clock, already initialized."""
	ready = EstimationEngine(clock=lambda: TODAY)
	await ready.initialize()
	return ready


@pytest.fixture
async def test_user(store: RecordStore) -> User:
	user = User(username="amani", full_name="Amani Mushi", location="Mbeya, Tanzania")
	await store.write_list(USERS_KEY, [user])
	return user


@pytest.fixture
def access_token(test_user: User) -> str:
	return create_access_token(test_user.id, expires_minutes=30)


def make_crop(user_id: uuid.UUID, **overrides: Any) -> CropRecord:
	fields: dict[str, Any] = {
		"user_id": user_id,
		"crop_type": CropTypeEnum.maize,
		"planting_date": date(2024, 1, 10),
		"field_size": 2.0,
		"fertilizer_amount": 0.0,
		"seed_variety": "",
	}
	fields.update(overrides)
	return CropRecord(**fields)


def make_observation(user_id: uuid.UUID, **overrides: Any) -> ClimateObservation:
	fields: dict[str, Any] = {
		"user_id": user_id,
		"date": date(2024, 6, 1),
		"temperature": 24.0,
		"rainfall": 1000.0,
		"humidity": 70.0,
		"wind_speed": 8.0,
		"solar_radiation": 20.0,
	}
	fields.update(overrides)
	return ClimateObservation(**fields)


@asynccontextmanager
async def _noop_lifespan(_: Any) -> AsyncGenerator[None, None]:
	yield


async def _client_for_app() -> AsyncGenerator[AsyncClient, None]:
	original_lifespan = app.router.lifespan_context
	app.router.lifespan_context = _noop_lifespan

	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://test") as test_client:
		yield test_client

	app.router.lifespan_context = original_lifespan
	app.dependency_overrides.clear()
	for name in ("redis", "engine"):
		if hasattr(app.state, name):
			delattr(app.state, name)


@pytest.fixture
async def client(
	fake_redis: FakeRedis,
	engine: EstimationEngine,
	test_user: User,
) -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with lifespan disabled and the current user fixed to ``test_user``."""
	app.state.redis = fake_redis
	app.state.engine = engine

	async def override_current_user() -> User:
		return test_user

	app.dependency_overrides[get_current_user] = override_current_user
	async for test_client in _client_for_app():
		yield test_client


@pytest.fixture
async def auth_client(fake_redis: FakeRedis, engine: EstimationEngine) -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with real bearer-token authentication."""
	app.state.redis = fake_redis
	app.state.engine = engine
	async for test_client in _client_for_app():
		yield test_client


@pytest.fixture
def crop_factory() -> Any:
	return make_crop


@pytest.fixture
def observation_factory() -> Any:
	return make_observation
