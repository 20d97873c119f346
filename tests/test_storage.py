from __future__ import annotations

import json
import uuid
from typing import Any

from app.auth.models import User
from app.config import EstimationStrategy
from app.models.records import ClimateImpact, PredictionRecord
from app.storage import (
    CURRENT_USER_KEY,
    RecordStore,
    climate_data_key,
    crop_data_key,
    predictions_key,
)


def _prediction(user_id: uuid.UUID) -> PredictionRecord:
    return PredictionRecord(
        user_id=user_id,
        crop_data_id=uuid.uuid4(),
        predicted_yield=3.42,
        predicted_rainfall=400.0,
        predicted_temperature=32.0,
        climate_impact=ClimateImpact(
            positive=[],
            negative=["High temperatures may cause heat stress"],
            recommendations=["Monitor weather forecasts regularly"],
        ),
        confidence=70,
        strategy=EstimationStrategy.heuristic,
    )


def test_per_user_key_layout() -> None:
    user_id = uuid.UUID("33333333-3333-3333-3333-333333333333")
    assert crop_data_key(user_id) == f"cropData_{user_id}"
    assert climate_data_key(user_id) == f"climateData_{user_id}"
    assert predictions_key(user_id) == f"predictions_{user_id}"


async def test_prediction_record_survives_reload(store: RecordStore, fake_redis: Any) -> None:
    user_id = uuid.uuid4()
    prediction = _prediction(user_id)

    await store.write_list(predictions_key(user_id), [prediction])
    reloaded = await store.read_list(predictions_key(user_id), PredictionRecord)

    assert reloaded == [prediction]
    # writing the reloaded value back changes nothing
    first = fake_redis.data[predictions_key(user_id)]
    await store.write_list(predictions_key(user_id), reloaded)
    assert fake_redis.data[predictions_key(user_id)] == first


async def test_stored_json_uses_camel_case_keys(store: RecordStore, fake_redis: Any) -> None:
    user_id = uuid.uuid4()
    await store.write_list(predictions_key(user_id), [_prediction(user_id)])

    stored = json.loads(fake_redis.data[predictions_key(user_id)])[0]
    assert {"cropDataId", "predictedYield", "climateImpact", "createdAt", "userId"} <= set(stored)
    assert stored["climateImpact"]["negative"] == ["High temperatures may cause heat stress"]


async def test_missing_keys_read_as_empty(store: RecordStore) -> None:
    assert await store.read_list(crop_data_key(uuid.uuid4()), PredictionRecord) == []
    assert await store.read_record(CURRENT_USER_KEY, User) is None


async def test_append_extends_existing_list(store: RecordStore) -> None:
    user_id = uuid.uuid4()
    key = predictions_key(user_id)
    await store.append(key, PredictionRecord, [_prediction(user_id)])
    updated = await store.append(key, PredictionRecord, [_prediction(user_id)])

    assert len(updated) == 2
    assert len(await store.read_list(key, PredictionRecord)) == 2
