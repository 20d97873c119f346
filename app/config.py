"""Application settings loaded from environment variables via pydantic-settings."""

from enum import StrEnum
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class EstimationStrategy(StrEnum):
    heuristic = "heuristic"
    learned = "learned"


class LogFormat(StrEnum):
    json = "json"
    console = "console"


class Settings(BaseSettings):
    """Central configuration, sourced from env vars or the .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── Redis (record store) ────────────────────────────────────────────────
    redis_url: str = "redis://localhost:6379/0"

    # ── Auth ────────────────────────────────────────────────────────────────
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60 * 24

    # ── Estimation engine ───────────────────────────────────────────────────
    estimation_strategy: EstimationStrategy = EstimationStrategy.heuristic
    estimation_jitter_enabled: bool = False
    training_samples: int = 1000
    training_seed: int | None = None
    engine_training_timeout_seconds: float | None = None
    initialize_engine_on_startup: bool = True

    # ── Text generation ─────────────────────────────────────────────────────
    text_generation_api_key: str = ""
    text_generation_base_url: str = "https://api.together.xyz/v1"
    text_generation_model: str = "meta-llama/Llama-2-7b-chat-hf"
    text_generation_timeout_seconds: float = 20.0

    # ── Weather lookup ──────────────────────────────────────────────────────
    geocoding_url: str = "https://nominatim.openstreetmap.org/search"
    weather_url: str = "https://api.open-meteo.com/v1/forecast"
    weather_timezone: str = "Africa/Nairobi"
    external_timeout_seconds: float = 10.0
    default_location: str = "Mbeya, Tanzania"

    # ── Observability ───────────────────────────────────────────────────────
    log_level: str = "info"
    log_format: LogFormat = LogFormat.json


@lru_cache
def get_settings() -> Settings:
    """Singleton settings instance (cached after first call)."""
    return Settings()
