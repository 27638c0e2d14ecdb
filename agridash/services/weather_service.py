"""OpenWeather proxy: fingerprinting plus cache lookup in front of the upstream fetch."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import httpx
import structlog

from agridash.errors import ClientInputError, ConfigurationError, UpstreamError
from agridash.services.cache_store import CacheStore, Clock, now_ms

# Downstream HTTP cache hint; independent of the server-side TTL.
CACHE_CONTROL = "public, max-age=30, stale-while-revalidate=120"
DEFAULT_TTL_MS = 60_000

logger = structlog.get_logger("agridash.weather")


_MILLI_DEGREE = Decimal("0.001")


def _round3(value: float) -> str:
	# Ties on the exact binary value round away from zero, matching the dashboard client.
	return f"{Decimal(value).quantize(_MILLI_DEGREE, rounding=ROUND_HALF_UP):f}"


def fingerprint(lat: float, lon: float, units: str, lang: str) -> str:
	"""Cache key; coordinates are rounded to 3 decimals so nearby requests share it."""
	return f"{_round3(lat)},{_round3(lon)},{units},{lang}"


def parse_coordinate(name: str, raw: str | None) -> float:
	if raw is None or not raw.strip():
		raise ClientInputError("lat and lon are required")
	try:
		value = float(raw)
	except ValueError as exc:
		raise ClientInputError(f"{name} must be a number") from exc
	if not math.isfinite(value):
		raise ClientInputError(f"{name} must be a number")
	if abs(value) > 180:
		raise ClientInputError(f"{name} is out of range")
	return value


@dataclass(slots=True)
class WeatherResult:
	payload: Any
	cache_hit: bool
	cache_control: str = CACHE_CONTROL


class WeatherService:
	def __init__(
		self,
		cache: CacheStore,
		http_client: httpx.AsyncClient,
		*,
		api_key: str,
		base_url: str = "https://api.openweathermap.org/data/2.5/weather",
		ttl_ms: int = DEFAULT_TTL_MS,
		clock: Clock = now_ms,
	):
		self.cache = cache
		self.http_client = http_client
		self.api_key = api_key
		self.base_url = base_url
		self.ttl_ms = ttl_ms
		self.clock = clock

	async def get_weather(
		self,
		lat: str | None,
		lon: str | None,
		units: str = "metric",
		lang: str = "en",
	) -> WeatherResult:
		lat_value = parse_coordinate("lat", lat)
		lon_value = parse_coordinate("lon", lon)
		if not self.api_key:
			raise ConfigurationError("OPENWEATHER_API_KEY")

		key = fingerprint(lat_value, lon_value, units, lang)
		cached = await self.cache.get(key)
		if cached is not None and cached.is_fresh(self.clock(), self.ttl_ms):
			logger.info("weather_cache_hit", fingerprint=key)
			return WeatherResult(payload=cached.payload, cache_hit=True)

		logger.info("weather_cache_miss", fingerprint=key, stale=cached is not None)
		payload = await self.fetch_upstream(lat, lon, units, lang)
		await self.cache.put(key, payload)
		return WeatherResult(payload=payload, cache_hit=False)

	async def fetch_upstream(self, lat: str | None, lon: str | None, units: str, lang: str) -> Any:
		params = {
			"lat": lat,
			"lon": lon,
			"units": units,
			"lang": lang,
			"appid": self.api_key,
		}
		response = await self.http_client.get(self.base_url, params=params)
		if not response.is_success:
			logger.warning("weather_upstream_error", status_code=response.status_code)
			raise UpstreamError(
				status_code=response.status_code,
				content=response.content,
				media_type=response.headers.get("content-type", "application/json"),
			)
		return response.json()
