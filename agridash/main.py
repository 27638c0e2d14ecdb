"""FastAPI application entrypoint — lifespan, routers, middleware."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from google import genai
from redis.asyncio import Redis
from redis.exceptions import RedisError

from agridash.config import Settings, get_settings
from agridash.errors import error_response
from agridash.middleware.logging import RequestLoggingMiddleware, configure_structured_logging
from agridash.routes import chat, crops, todos, weather
from agridash.schemas.resources import Crop, Todo
from agridash.services.cache_store import CacheStore, InMemoryCacheStore, RedisCacheStore
from agridash.services.repository import InMemoryRepository

logger = logging.getLogger("agridash")


async def _build_weather_cache(settings: Settings) -> tuple[CacheStore, Redis | None]:
    """Redis-backed cache when REDIS_URL is set and reachable, else in-process LRU."""
    in_memory = InMemoryCacheStore(max_entries=settings.weather_cache_max_entries)
    if not settings.redis_url:
        return in_memory, None

    redis = Redis.from_url(settings.redis_url, decode_responses=True)
    try:
        await redis.ping()
    except (RedisError, OSError) as exc:
        logger.warning("redis unavailable, using in-memory weather cache", extra={"error": str(exc)})
        await redis.aclose()
        return in_memory, None
    store = RedisCacheStore(redis, retention_seconds=settings.weather_cache_retention_seconds)
    return store, redis


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application startup / shutdown lifecycle.

    Startup:
      1. Initialize structured logging
      2. Open the shared keep-alive HTTP client for upstream calls
      3. Pick the weather cache backing (Redis or in-memory)
      4. Create the Gemini client when GEMINI_API_KEY is configured

    Shutdown:
      1. Close the HTTP client
      2. Close the Redis connection pool, if any
    """
    settings = get_settings()
    configure_structured_logging(settings)
    logger.info(
        "AgriDash starting",
        extra={
            "port": settings.port,
            "weather_enabled": bool(settings.openweather_api_key),
            "chat_enabled": bool(settings.gemini_api_key),
        },
    )

    app.state.http_client = httpx.AsyncClient(timeout=settings.upstream_timeout_seconds)
    app.state.weather_cache, redis = await _build_weather_cache(settings)
    app.state.genai_client = genai.Client(api_key=settings.gemini_api_key) if settings.gemini_api_key else None

    yield

    logger.info("AgriDash shutting down")
    await app.state.http_client.aclose()
    if redis is not None:
        await redis.aclose()


app = FastAPI(
    title="AgriDash API",
    description=(
        "Farming-assistant dashboard backend: cached weather proxy, "
        "crop and to-do lists, and a Gemini-backed chat assistant."
    ),
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Collections live for the lifetime of the process.
app.state.crops = InMemoryRepository(Crop)
app.state.todos = InMemoryRepository(Todo)

# ── Middleware ──────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(RequestValidationError)
async def request_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Mistyped or malformed bodies are reported as 400 with an ``error`` field."""
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body", str(exc.errors()))


# ── Health check ────────────────────────────────────────────────────────────
@app.get("/api/health", tags=["system"])
async def health_check() -> dict[str, bool]:
    """Liveness probe."""
    return {"ok": True}


# ── Router registration ────────────────────────────────────────────────────
app.include_router(weather.router, prefix="/api")
app.include_router(crops.router, prefix="/api")
app.include_router(todos.router, prefix="/api")
app.include_router(chat.router, prefix="/api")


def serve() -> None:
    """Console entrypoint: run the API with uvicorn on the configured port."""
    settings = get_settings()
    uvicorn.run("agridash.main:app", host=settings.host, port=settings.port)
