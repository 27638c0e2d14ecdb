"""Error taxonomy shared by the services and mapped to JSON at the route edge."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import status
from fastapi.responses import JSONResponse, Response


@dataclass(slots=True)
class ClientInputError(Exception):
	"""Required request input is missing or malformed."""

	message: str
	status_code: int = status.HTTP_400_BAD_REQUEST


@dataclass(slots=True)
class ConfigurationError(Exception):
	"""A credential needed by one endpoint is not configured."""

	setting: str
	status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

	@property
	def message(self) -> str:
		return f"{self.setting} missing"


@dataclass(slots=True)
class UpstreamError(Exception):
	"""Non-success response from a third-party provider, kept verbatim."""

	status_code: int
	content: bytes
	media_type: str = "application/json"


def error_response(status_code: int, error: str, details: str | None = None) -> JSONResponse:
	body: dict[str, str] = {"error": error}
	if details is not None:
		body["details"] = details
	return JSONResponse(status_code=status_code, content=body)


def upstream_response(exc: UpstreamError) -> Response:
	return Response(content=exc.content, status_code=exc.status_code, media_type=exc.media_type)
