"""Request dependencies: record store, estimation engine, current user."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.auth.jwt import AuthError, decode_token
from app.auth.models import User
from app.engine.service import EstimationEngine
from app.errors import NotFoundError
from app.services.user_service import UserService
from app.storage import RecordStore

bearer_scheme = HTTPBearer(auto_error=False)


def _raise_auth(exc: AuthError) -> HTTPException:
	return HTTPException(
		status_code=exc.status_code,
		detail={"error": exc.code, "message": exc.detail},
	)


def get_store(request: Request) -> RecordStore:
	redis_client = getattr(request.app.state, "redis", None)
	if redis_client is None:
		raise HTTPException(
			status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
			detail="Record store is unavailable, please retry shortly",
		)
	return RecordStore(redis_client)


def get_engine(request: Request) -> EstimationEngine:
	engine = getattr(request.app.state, "engine", None)
	if engine is None:
		raise HTTPException(
			status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
			detail="Estimation engine is unavailable, please retry shortly",
		)
	return engine


async def get_current_user(
	credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
	store: RecordStore = Depends(get_store),
) -> User:
	if credentials is None or credentials.scheme.lower() != "bearer":
		raise _raise_auth(AuthError(code="auth_required", detail="Bearer token is required"))

	try:
		user_id = decode_token(credentials.credentials)
	except AuthError as exc:
		raise _raise_auth(exc) from exc

	try:
		return await UserService(store).get_user(user_id)
	except NotFoundError as exc:
		raise _raise_auth(AuthError(code="user_invalid", detail="User no longer exists")) from exc
