"""Structured logging setup and per-request access logs with request IDs."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from agridash.config import LogFormat, Settings, get_settings

REQUEST_ID_HEADER = "x-request-id"

_configured = False


def configure_structured_logging(settings: Settings | None = None) -> None:
	"""Configure stdlib + structlog once per process."""
	global _configured
	if _configured:
		return

	settings = settings or get_settings()
	log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

	processors: list[Any] = [
		structlog.contextvars.merge_contextvars,
		structlog.processors.add_log_level,
		structlog.processors.TimeStamper(fmt="iso", utc=True),
		structlog.processors.format_exc_info,
	]
	if settings.log_format == LogFormat.json:
		processors.append(structlog.processors.JSONRenderer())
		logging.basicConfig(level=log_level, format="%(message)s")
	else:
		processors.append(structlog.dev.ConsoleRenderer())
		logging.basicConfig(level=log_level)

	structlog.configure(
		processors=processors,
		wrapper_class=structlog.make_filtering_bound_logger(log_level),
		logger_factory=structlog.PrintLoggerFactory(),
		cache_logger_on_first_use=True,
	)
	_configured = True


class RequestLoggingMiddleware(BaseHTTPMiddleware):
	"""Bind a request ID to the log context and log one line per request.

	Routes may set ``request.state.cache_status`` ("hit" / "miss"); it is
	included in the access log line.
	"""

	async def dispatch(self, request: Request, call_next):  # type: ignore[override]
		request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
		request.state.request_id = request_id

		structlog.contextvars.clear_contextvars()
		structlog.contextvars.bind_contextvars(request_id=request_id)
		logger = structlog.get_logger("agridash.request")
		started = time.perf_counter()

		try:
			response = await call_next(request)
		except Exception as exc:
			logger.exception(
				"http_request_failed",
				method=request.method,
				path=request.url.path,
				duration_ms=_elapsed_ms(started),
				error=str(exc),
			)
			raise

		response.headers[REQUEST_ID_HEADER] = request_id
		cache_status = getattr(request.state, "cache_status", None)
		logger.info(
			"http_request",
			method=request.method,
			path=request.url.path,
			status_code=response.status_code,
			cache=cache_status,
			duration_ms=_elapsed_ms(started),
		)
		return response


def _elapsed_ms(started: float) -> float:
	return round((time.perf_counter() - started) * 1000.0, 2)
