from __future__ import annotations

import uuid
from datetime import date
from typing import Any

import numpy as np
import pytest
from httpx import AsyncClient

from app.auth.models import User
from app.config import EstimationStrategy
from app.engine import constants
from app.engine.service import EstimationEngine
from app.errors import EngineNotInitializedError, InvalidInputError, NotFoundError
from app.main import app
from app.models.enums import CropTypeEnum
from app.models.records import PredictionRecord
from app.services.prediction_service import PredictionService
from app.storage import RecordStore, climate_data_key, crop_data_key, predictions_key

TODAY = date(2024, 7, 15)


async def _seed(store: RecordStore, user: User, crops: list[Any], observations: list[Any]) -> None:
    await store.write_list(crop_data_key(user.id), crops)
    await store.write_list(climate_data_key(user.id), observations)


async def test_generate_one_prediction_per_crop(
    store: RecordStore,
    engine: EstimationEngine,
    test_user: User,
    crop_factory: Any,
    observation_factory: Any,
) -> None:
    maize = crop_factory(test_user.id, field_size=2.0)
    beans = crop_factory(test_user.id, crop_type=CropTypeEnum.beans, field_size=1.0, fertilizer_amount=60.0)
    await _seed(
        store,
        test_user,
        [maize, beans],
        [observation_factory(test_user.id, temperature=32.0, rainfall=400.0, humidity=85.0)],
    )

    created = await PredictionService(store, engine).generate(test_user.id)

    assert [item.crop_data_id for item in created] == [maize.id, beans.id]
    assert created[0].predicted_yield == pytest.approx(3.42)
    assert created[0].confidence == 70
    assert created[1].confidence == 75
    assert created[0].climate_impact.negative == [constants.DROUGHT_RISK, constants.HEAT_STRESS_RISK]
    assert await store.read_list(predictions_key(test_user.id), PredictionRecord) == created


async def test_generate_for_single_crop(
    store: RecordStore,
    engine: EstimationEngine,
    test_user: User,
    crop_factory: Any,
) -> None:
    first = crop_factory(test_user.id)
    second = crop_factory(test_user.id, crop_type=CropTypeEnum.rice)
    await _seed(store, test_user, [first, second], [])

    service = PredictionService(store, engine)
    created = await service.generate(test_user.id, second.id)

    assert [item.crop_data_id for item in created] == [second.id]
    with pytest.raises(NotFoundError):
        await service.generate(test_user.id, uuid.uuid4())


async def test_generate_without_crops_is_rejected(store: RecordStore, engine: EstimationEngine, test_user: User) -> None:
    with pytest.raises(InvalidInputError):
        await PredictionService(store, engine).generate(test_user.id)


async def test_generate_before_engine_ready(store: RecordStore, test_user: User, crop_factory: Any) -> None:
    await _seed(store, test_user, [crop_factory(test_user.id)], [])
    cold = EstimationEngine(clock=lambda: TODAY)

    with pytest.raises(EngineNotInitializedError):
        await PredictionService(store, cold).generate(test_user.id)
    assert await store.read_list(predictions_key(test_user.id), PredictionRecord) == []


async def test_prediction_endpoints(client: AsyncClient) -> None:
    await client.post(
        "/api/v1/crops",
        json={"crop_type": "maize", "planting_date": "2024-01-10", "field_size": 2.0},
    )
    await client.post(
        "/api/v1/crops",
        json={"crop_type": "rice", "planting_date": "2024-06-20", "field_size": 1.0, "seed_variety": "SARO 5"},
    )

    generated = await client.post("/api/v1/predictions", json={})
    assert generated.status_code == 201
    items = generated.json()["items"]
    assert len(items) == 2
    assert all(item["strategy"] == "heuristic" for item in items)
    assert all(0 <= item["confidence"] <= 95 for item in items)

    history = await client.get("/api/v1/predictions")
    assert [item["id"] for item in history.json()["items"]] == [item["id"] for item in items]

    summary = (await client.get("/api/v1/predictions/summary")).json()
    assert summary["total"] == 2
    assert [entry["crop_type"] for entry in summary["by_crop"]] == ["maize", "rice"]
    assert [point["label"] for point in summary["series"]] == ["P1", "P2"]
    assert summary["by_crop"][0]["average_yield"] == pytest.approx(5.0)


async def test_prediction_without_crops_maps_to_400(client: AsyncClient) -> None:
    response = await client.post("/api/v1/predictions")
    assert response.status_code == 400


async def test_engine_not_ready_maps_to_503(client: AsyncClient) -> None:
    app.state.engine = EstimationEngine(clock=lambda: TODAY)
    await client.post(
        "/api/v1/crops",
        json={"crop_type": "beans", "planting_date": "2024-05-01", "field_size": 1.5},
    )

    response = await client.post("/api/v1/predictions", json={})

    assert response.status_code == 503
    assert "retry" in response.json()["detail"]


async def test_metrics_null_without_trained_model(client: AsyncClient) -> None:
    response = await client.get("/api/v1/predictions/metrics")
    assert response.status_code == 200
    assert response.json() is None


async def test_health_reports_engine_state(client: AsyncClient) -> None:
    body = (await client.get("/health")).json()
    assert body["status"] == "ok"
    assert body["engine_ready"] is True
    assert body["estimation_strategy"] == "heuristic"


async def test_failed_warm_up_is_retried_by_next_request(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    engine = EstimationEngine(
        EstimationStrategy.learned,
        rng=np.random.default_rng(5),
        training_samples=120,
        clock=lambda: TODAY,
    )
    original_train = engine._train
    attempts = 0

    def flaky_train() -> Any:
        nonlocal attempts
        attempts += 1
        if attempts == 1:
            raise RuntimeError("worker pool unavailable")
        return original_train()

    monkeypatch.setattr(engine, "_train", flaky_train)

    # startup warm-up fails and leaves the engine not ready
    await engine.initialize_in_background()
    assert not engine.ready

    app.state.engine = engine
    await client.post(
        "/api/v1/crops",
        json={"crop_type": "maize", "planting_date": "2024-01-10", "field_size": 2.0},
    )

    first = await client.post("/api/v1/predictions", json={})
    assert first.status_code == 503

    # the rejected request started a fresh setup in the background
    retry = engine._background_task
    assert retry is not None
    await retry
    assert engine.ready
    assert attempts == 2

    second = await client.post("/api/v1/predictions", json={})
    assert second.status_code == 201
    assert second.json()["items"][0]["strategy"] == "learned"

    metrics = await client.get("/api/v1/predictions/metrics")
    assert metrics.status_code == 200
    assert metrics.json()["training_samples"] > 0
