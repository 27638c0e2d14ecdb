"""FastAPI dependencies resolving process-wide state set up by the lifespan."""

from __future__ import annotations

from fastapi import Request

from agridash.config import get_settings
from agridash.schemas.resources import Crop, Todo
from agridash.services.chat_service import ChatService
from agridash.services.repository import Repository
from agridash.services.weather_service import WeatherService


def get_weather_service(request: Request) -> WeatherService:
	settings = get_settings()
	return WeatherService(
		request.app.state.weather_cache,
		request.app.state.http_client,
		api_key=settings.openweather_api_key,
		base_url=settings.openweather_base_url,
		ttl_ms=settings.weather_cache_ttl_ms,
	)


def get_chat_service(request: Request) -> ChatService:
	settings = get_settings()
	return ChatService(getattr(request.app.state, "genai_client", None), model=settings.gemini_model)


def get_crop_repository(request: Request) -> Repository[Crop]:
	return request.app.state.crops


def get_todo_repository(request: Request) -> Repository[Todo]:
	return request.app.state.todos
