"""Domain error taxonomy shared by the engine, services and routes."""

from __future__ import annotations


class EngineNotInitializedError(RuntimeError):
	"""Raised when the estimation engine is used before its one-time setup completed."""


class InvalidInputError(ValueError):
	"""Raised when a crop record or climate observation carries unusable numbers."""


class ExternalServiceUnavailableError(RuntimeError):
	"""Raised when geocoding or weather lookup fails or returns unusable data."""


class NotFoundError(LookupError):
	"""Raised when a record lookup by id fails."""


class DuplicateError(ValueError):
	"""Raised when registering a username that already exists."""
