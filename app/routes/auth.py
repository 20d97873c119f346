"""Registration, username login, session and profile routes."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.auth.dependencies import get_current_user, get_store
from app.auth.jwt import create_access_token
from app.auth.models import User
from app.errors import DuplicateError
from app.schemas.auth import (
	LoginRequest,
	ProfileUpdate,
	RegisterRequest,
	TokenResponse,
	UserRead,
	UserStats,
)
from app.services.user_service import UserService
from app.storage import RecordStore

router = APIRouter(prefix="/auth", tags=["auth"])

_logger = structlog.get_logger("mavuno.auth")


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, DuplicateError):
		return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	_logger.error("auth_service_failed", error=str(exc), error_type=type(exc).__name__)
	return HTTPException(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		detail="Unexpected account service failure",
	)


def _token_response(user: User) -> TokenResponse:
	return TokenResponse(
		access_token=create_access_token(user.id),
		user=UserRead.model_validate(user),
	)


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
	payload: RegisterRequest,
	store: RecordStore = Depends(get_store),
) -> TokenResponse:
	try:
		user = await UserService(store).register(payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	_logger.info("user_registered", user_id=str(user.id))
	return _token_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(
	payload: LoginRequest,
	store: RecordStore = Depends(get_store),
) -> TokenResponse:
	try:
		user = await UserService(store).login(payload.username)
	except LookupError as exc:
		raise HTTPException(
			status_code=status.HTTP_401_UNAUTHORIZED,
			detail={"error": "login_failed", "message": "Unknown username"},
		) from exc
	except Exception as exc:
		raise _map_error(exc) from exc
	return _token_response(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
	store: RecordStore = Depends(get_store),
	_user: User = Depends(get_current_user),
) -> Response:
	try:
		await UserService(store).logout()
	except Exception as exc:
		raise _map_error(exc) from exc
	return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserRead)
async def read_profile(current_user: User = Depends(get_current_user)) -> UserRead:
	return UserRead.model_validate(current_user)


@router.put("/me", response_model=UserRead)
async def update_profile(
	payload: ProfileUpdate,
	store: RecordStore = Depends(get_store),
	current_user: User = Depends(get_current_user),
) -> UserRead:
	try:
		user = await UserService(store).update_profile(current_user.id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return UserRead.model_validate(user)


@router.get("/me/stats", response_model=UserStats)
async def read_stats(
	store: RecordStore = Depends(get_store),
	current_user: User = Depends(get_current_user),
) -> UserStats:
	try:
		return await UserService(store).stats(current_user.id)
	except Exception as exc:
		raise _map_error(exc) from exc
