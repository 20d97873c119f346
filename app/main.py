"""FastAPI application entrypoint: lifespan, routers, middleware."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import Redis

from app.config import get_settings
from app.engine.service import EstimationEngine
from app.middleware.logging import RequestLoggingMiddleware, configure_structured_logging
from app.routes import auth, climate, crops, insights, predictions, settings as settings_routes

logger = structlog.get_logger("mavuno")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application startup / shutdown lifecycle.

    Startup:
      1. Initialize structured logging
      2. Connect to Redis (record store)
      3. Build the estimation engine and start its one-time setup in the
         background; requests before it finishes get a 503 and restart a
         failed setup

    Shutdown:
      1. Cancel a still-running engine setup
      2. Close Redis connection pool
    """
    configure_structured_logging()
    settings = get_settings()
    logger.info(
        "mavuno_starting",
        log_level=settings.log_level,
        estimation_strategy=settings.estimation_strategy.value,
    )

    redis: Redis | None = None
    warm_up: asyncio.Task[None] | None = None
    try:
        redis = Redis.from_url(settings.redis_url, decode_responses=True)
        await redis.ping()
        app.state.redis = redis

        engine = EstimationEngine.from_settings(settings)
        app.state.engine = engine
        if settings.initialize_engine_on_startup:
            warm_up = engine.initialize_in_background()
    except Exception as exc:
        logger.exception("startup_failure", error=str(exc))
        raise

    yield

    logger.info("mavuno_shutting_down")
    if warm_up is not None and not warm_up.done():
        warm_up.cancel()
    if redis is not None:
        await redis.aclose()


app = FastAPI(
    title="Mavuno API",
    description=(
        "Smallholder farm records and yield estimation: crop and climate "
        "records, heuristic or learned yield estimates with confidence "
        "scores, rule-based advisories and text-generation insights."
    ),
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS ────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)


# ── Health check ────────────────────────────────────────────────────────────
@app.get("/health", tags=["system"])
async def health_check() -> dict[str, Any]:
    """Liveness plus estimation-engine readiness."""
    engine: EstimationEngine | None = getattr(app.state, "engine", None)
    return {
        "status": "ok",
        "service": "mavuno",
        "version": "0.1.0",
        "engine_ready": bool(engine is not None and engine.ready),
        "estimation_strategy": (
            engine.strategy.value if engine is not None else get_settings().estimation_strategy.value
        ),
    }


# ── Router registration ────────────────────────────────────────────────────
app.include_router(auth.router, prefix="/api/v1")
app.include_router(crops.router, prefix="/api/v1")
app.include_router(climate.router, prefix="/api/v1")
app.include_router(predictions.router, prefix="/api/v1")
app.include_router(insights.router, prefix="/api/v1")
app.include_router(settings_routes.router, prefix="/api/v1")
