"""Access-token issuing and validation for username sessions."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from app.config import get_settings


@dataclass(slots=True)
class AuthError(Exception):
	"""Authentication failure carrying an error code for the HTTP edge."""

	code: str
	detail: str
	status_code: int = 401


def create_access_token(user_id: uuid.UUID | str, expires_minutes: int | None = None) -> str:
	settings = get_settings()
	ttl = expires_minutes or settings.jwt_access_token_expire_minutes
	now = datetime.now(UTC)
	claims: dict[str, Any] = {
		"sub": str(user_id),
		"iat": int(now.timestamp()),
		"exp": int((now + timedelta(minutes=ttl)).timestamp()),
	}
	return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> uuid.UUID:
	"""Validate ``token`` and return the user id it was issued for."""
	settings = get_settings()
	try:
		payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
	except JWTError as exc:
		raise AuthError(code="token_invalid", detail="Invalid authentication token") from exc

	exp_raw = payload.get("exp")
	if not isinstance(exp_raw, int):
		raise AuthError(code="token_invalid", detail="Token expiration is missing")
	if datetime.now(UTC).timestamp() >= exp_raw:
		raise AuthError(code="token_expired", detail="Authentication token has expired")

	try:
		return uuid.UUID(str(payload["sub"]))
	except (KeyError, ValueError) as exc:
		raise AuthError(code="token_invalid", detail="Token subject is invalid") from exc
