"""Cached OpenWeather proxy routes."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response

from agridash.dependencies import get_weather_service
from agridash.errors import (
	ClientInputError,
	ConfigurationError,
	UpstreamError,
	error_response,
	upstream_response,
)
from agridash.schemas.weather import WeatherSummary
from agridash.services.weather_service import WeatherResult, WeatherService

router = APIRouter(prefix="/weather", tags=["weather"])
logger = structlog.get_logger("agridash.weather")


def _map_error(exc: Exception) -> Response:
	if isinstance(exc, UpstreamError):
		return upstream_response(exc)
	if isinstance(exc, (ClientInputError, ConfigurationError)):
		return error_response(exc.status_code, exc.message)
	logger.exception("weather_fetch_failed", error=str(exc))
	return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Weather fetch failed", str(exc))


async def _lookup(
	request: Request,
	service: WeatherService,
	lat: str | None,
	lon: str | None,
	units: str,
	lang: str,
) -> WeatherResult:
	result = await service.get_weather(lat, lon, units=units, lang=lang)
	request.state.cache_status = "hit" if result.cache_hit else "miss"
	return result


def _cache_headers(result: WeatherResult) -> dict[str, str]:
	return {
		"Cache-Control": result.cache_control,
		"X-Cache": "hit" if result.cache_hit else "miss",
	}


@router.get("")
async def get_weather(
	request: Request,
	lat: str | None = None,
	lon: str | None = None,
	units: str = "metric",
	lang: str = "en",
	service: WeatherService = Depends(get_weather_service),
) -> Response:
	try:
		result = await _lookup(request, service, lat, lon, units, lang)
	except Exception as exc:
		return _map_error(exc)
	return JSONResponse(content=result.payload, headers=_cache_headers(result))


@router.get("/summary", response_model=WeatherSummary)
async def get_weather_summary(
	request: Request,
	lat: str | None = None,
	lon: str | None = None,
	units: str = "metric",
	lang: str = "en",
	service: WeatherService = Depends(get_weather_service),
) -> Response:
	try:
		result = await _lookup(request, service, lat, lon, units, lang)
		summary = WeatherSummary.from_payload(result.payload)
	except Exception as exc:
		return _map_error(exc)
	return JSONResponse(content=summary.model_dump(), headers=_cache_headers(result))
