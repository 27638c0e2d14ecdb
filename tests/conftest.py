"""Shared pytest fixtures — async test client, fake upstreams, controllable clock."""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from agridash.dependencies import (
    get_chat_service,
    get_crop_repository,
    get_todo_repository,
    get_weather_service,
)
from agridash.main import app
from agridash.schemas.resources import Crop, Todo
from agridash.services.cache_store import CacheEntry, InMemoryCacheStore
from agridash.services.chat_service import ChatService
from agridash.services.repository import InMemoryRepository
from agridash.services.weather_service import WeatherService

TEST_API_KEY = "test-openweather-key"

WEATHER_PAYLOAD: dict[str, Any] = {
    "name": "Springfield",
    "main": {"temp": 21.6, "humidity": 64},
    "weather": [{"description": "scattered clouds"}],
    "wind": {"speed": 3.1},
}


class FakeClock:
    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class RecordingCacheStore(InMemoryCacheStore):
    """In-memory store that counts lookups and writes."""

    def __init__(self, clock: FakeClock) -> None:
        super().__init__(max_entries=16, clock=clock)
        self.gets = 0
        self.puts = 0

    async def get(self, fingerprint: str) -> CacheEntry | None:
        self.gets += 1
        return await super().get(fingerprint)

    async def put(self, fingerprint: str, payload: Any) -> None:
        self.puts += 1
        await super().put(fingerprint, payload)


class FakeOpenWeather:
    """httpx.MockTransport handler standing in for the OpenWeather API."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.payload: dict[str, Any] = dict(WEATHER_PAYLOAD)
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.payload)


class FakeGenAIModels:
    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.result: Any = SimpleNamespace(text="Water early in the morning.")
        self.error: Exception | None = None

    async def generate_content(self, *, model: str, contents: Any) -> Any:
        self.calls.append({"model": model, "contents": contents})
        if self.error is not None:
            raise self.error
        return self.result


class FakeGenAIClient:
    def __init__(self) -> None:
        self.models = FakeGenAIModels()
        self.aio = SimpleNamespace(models=self.models)


class FakeRedis:
    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.get = AsyncMock(side_effect=self._get)
        self.setex = AsyncMock(side_effect=self._setex)

    async def _get(self, key: str) -> str | None:
        return self.store.get(key)

    async def _setex(self, key: str, _seconds: int, value: str) -> bool:
        self.store[key] = value
        return True

    def stored(self, key: str) -> dict[str, Any]:
        return json.loads(self.store[key])


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def weather_cache(clock: FakeClock) -> RecordingCacheStore:
    return RecordingCacheStore(clock)


@pytest.fixture
def open_weather() -> FakeOpenWeather:
    return FakeOpenWeather()


@pytest.fixture
async def upstream_http(open_weather: FakeOpenWeather) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(open_weather)) as http_client:
        yield http_client


@pytest.fixture
def weather_service(
    weather_cache: RecordingCacheStore,
    upstream_http: httpx.AsyncClient,
    clock: FakeClock,
) -> WeatherService:
    return WeatherService(
        weather_cache,
        upstream_http,
        api_key=TEST_API_KEY,
        base_url="https://weather.test/data/2.5/weather",
        clock=clock,
    )


@pytest.fixture
def genai_client() -> FakeGenAIClient:
    return FakeGenAIClient()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
async def client(
    weather_service: WeatherService,
    genai_client: FakeGenAIClient,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX async client with lifespan disabled and fresh in-memory state."""
    crops: InMemoryRepository[Crop] = InMemoryRepository(Crop)
    todos: InMemoryRepository[Todo] = InMemoryRepository(Todo)

    app.dependency_overrides[get_weather_service] = lambda: weather_service
    app.dependency_overrides[get_chat_service] = lambda: ChatService(genai_client)  # type: ignore[arg-type]
    app.dependency_overrides[get_crop_repository] = lambda: crops
    app.dependency_overrides[get_todo_repository] = lambda: todos
    original_lifespan = app.router.lifespan_context

    @asynccontextmanager
    async def noop_lifespan(_: Any) -> AsyncGenerator[None, None]:
        yield

    app.router.lifespan_context = noop_lifespan

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.router.lifespan_context = original_lifespan
    app.dependency_overrides.clear()
