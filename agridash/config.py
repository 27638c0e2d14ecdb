"""Application settings loaded from environment variables via pydantic-settings."""

from enum import StrEnum
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class LogFormat(StrEnum):
    json = "json"
    console = "console"


class Settings(BaseSettings):
    """Central configuration — all values sourced from env vars or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── Server ──────────────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 4000
    cors_origin: str = "http://localhost:5173"

    # ── Weather ─────────────────────────────────────────────────────────────
    openweather_api_key: str = ""
    openweather_base_url: str = "https://api.openweathermap.org/data/2.5/weather"
    weather_cache_ttl_ms: int = 60_000
    weather_cache_max_entries: int = 1024
    weather_cache_retention_seconds: int = 3600
    upstream_timeout_seconds: float | None = None

    # ── Redis (optional shared weather cache) ───────────────────────────────
    redis_url: str = ""

    # ── LLM ─────────────────────────────────────────────────────────────────
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"

    # ── Observability ───────────────────────────────────────────────────────
    log_level: str = "info"
    log_format: LogFormat = LogFormat.json

    @property
    def cors_origins(self) -> list[str]:
        """Allowed cross-origin callers, parsed from the comma-separated setting."""
        return [origin.strip() for origin in self.cors_origin.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Singleton settings instance (cached after first call)."""
    return Settings()
