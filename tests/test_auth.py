from __future__ import annotations

import uuid

import pytest
from httpx import AsyncClient

from app.auth.jwt import AuthError, create_access_token, decode_token
from app.auth.models import User
from app.errors import DuplicateError, NotFoundError
from app.schemas.auth import ProfileUpdate, RegisterRequest
from app.services.user_service import UserService
from app.storage import CURRENT_USER_KEY, RecordStore


def test_jwt_create_decode_roundtrip() -> None:
    user_id = uuid.uuid4()
    token = create_access_token(user_id, expires_minutes=5)
    assert decode_token(token) == user_id


def test_decode_invalid_token_raises_auth_error() -> None:
    with pytest.raises(AuthError):
        decode_token("invalid.token.payload")


async def test_duplicate_username_is_rejected(store: RecordStore) -> None:
    service = UserService(store)
    await service.register(RegisterRequest(username="neema"))

    with pytest.raises(DuplicateError):
        await service.register(RegisterRequest(username="neema", email="other@example.org"))
    assert len(await service.list_users()) == 1


async def test_register_then_login_succeeds(store: RecordStore) -> None:
    service = UserService(store)
    registered = await service.register(RegisterRequest(username="baraka", location="Arusha"))
    await service.logout()
    assert await service.current_session() is None

    logged_in = await service.login("baraka")

    assert logged_in == registered
    assert await store.read_record(CURRENT_USER_KEY, User) == registered


async def test_login_with_unknown_username_fails(store: RecordStore) -> None:
    with pytest.raises(NotFoundError):
        await UserService(store).login("nobody")


async def test_profile_update_refreshes_session(store: RecordStore) -> None:
    service = UserService(store)
    user = await service.register(RegisterRequest(username="zawadi"))

    updated = await service.update_profile(user.id, ProfileUpdate(location="Dodoma"))

    assert updated.location == "Dodoma"
    assert updated.username == "zawadi"
    session = await service.current_session()
    assert session is not None and session.location == "Dodoma"


async def test_register_login_endpoints(auth_client: AsyncClient) -> None:
    response = await auth_client.post(
        "/api/v1/auth/register",
        json={"username": "juma", "full_name": "Juma Hassan", "location": "Mbeya, Tanzania"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["username"] == "juma"

    duplicate = await auth_client.post("/api/v1/auth/register", json={"username": "juma"})
    assert duplicate.status_code == 409

    login = await auth_client.post("/api/v1/auth/login", json={"username": "juma"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = await auth_client.get("/api/v1/auth/me", headers={"authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["full_name"] == "Juma Hassan"


async def test_unknown_login_is_unauthorized(auth_client: AsyncClient) -> None:
    response = await auth_client.post("/api/v1/auth/login", json={"username": "ghost"})
    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "login_failed"


async def test_missing_token_rejected_on_protected_endpoint(auth_client: AsyncClient) -> None:
    response = await auth_client.get("/api/v1/crops")
    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "auth_required"


async def test_token_for_removed_user_is_rejected(auth_client: AsyncClient) -> None:
    token = create_access_token(uuid.uuid4())
    response = await auth_client.get("/api/v1/auth/me", headers={"authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "user_invalid"


async def test_stats_and_logout(auth_client: AsyncClient, test_user: User, access_token: str) -> None:
    headers = {"authorization": f"Bearer {access_token}"}

    stats = await auth_client.get("/api/v1/auth/me/stats", headers=headers)
    assert stats.status_code == 200
    assert stats.json() == {"crop_records": 0, "climate_observations": 0, "predictions": 0}

    logout = await auth_client.post("/api/v1/auth/logout", headers=headers)
    assert logout.status_code == 204


async def test_language_setting_defaults_and_updates(auth_client: AsyncClient) -> None:
    initial = await auth_client.get("/api/v1/settings/language")
    assert initial.json() == {"language": "en"}

    updated = await auth_client.put("/api/v1/settings/language", json={"language": "sw"})
    assert updated.status_code == 200
    assert (await auth_client.get("/api/v1/settings/language")).json() == {"language": "sw"}

    invalid = await auth_client.put("/api/v1/settings/language", json={"language": "fr"})
    assert invalid.status_code == 422
