"""structlog configuration and per-request logging middleware."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import LogFormat, Settings, get_settings

_configured = False

QUIET_PATHS = frozenset({"/health"})


def configure_structured_logging(settings: Settings | None = None) -> None:
	"""Configure stdlib logging and structlog once per process."""
	global _configured
	if _configured:
		return

	settings = settings or get_settings()
	log_level = logging.getLevelNamesMapping().get(settings.log_level.upper(), logging.INFO)

	processors: list[Any] = [
		structlog.contextvars.merge_contextvars,
		structlog.processors.add_log_level,
		structlog.processors.TimeStamper(fmt="iso", utc=True),
		structlog.processors.format_exc_info,
	]
	if settings.log_format == LogFormat.json:
		logging.basicConfig(level=log_level, format="%(message)s")
		processors.append(structlog.processors.JSONRenderer())
	else:
		logging.basicConfig(level=log_level)
		processors.append(structlog.dev.ConsoleRenderer())

	structlog.configure(
		processors=processors,
		wrapper_class=structlog.make_filtering_bound_logger(log_level),
		logger_factory=structlog.PrintLoggerFactory(),
		cache_logger_on_first_use=True,
	)
	_configured = True


class RequestLoggingMiddleware(BaseHTTPMiddleware):
	"""Bind a request id for every log line of a request and log its outcome with timing.

	Health probes are logged at debug level only.
	"""

	async def dispatch(self, request: Request, call_next):  # type: ignore[override]
		request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
		request.state.request_id = request_id

		structlog.contextvars.clear_contextvars()
		structlog.contextvars.bind_contextvars(
			request_id=request_id,
			method=request.method,
			path=request.url.path,
		)

		logger = structlog.get_logger("mavuno.request")
		start = time.perf_counter()
		try:
			response = await call_next(request)
		except Exception as exc:
			logger.exception(
				"http_request_failed",
				duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
				error=str(exc),
			)
			raise

		response.headers["x-request-id"] = request_id
		log = logger.debug if request.url.path in QUIET_PATHS else logger.info
		log(
			"http_request",
			status_code=response.status_code,
			duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
		)
		return response
