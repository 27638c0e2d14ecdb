"""Gemini chat relay route."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from agridash.dependencies import get_chat_service
from agridash.errors import ConfigurationError, error_response
from agridash.schemas.chat import ChatRequest, ChatResponse
from agridash.services.chat_service import ChatService

router = APIRouter(tags=["chat"])
logger = structlog.get_logger("agridash.chat")


def _map_error(exc: Exception) -> JSONResponse:
	if isinstance(exc, ConfigurationError):
		return error_response(exc.status_code, exc.message)
	logger.exception("chat_failed", error=str(exc))
	return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Gemini error", str(exc))


@router.post("/gemini-chat", response_model=ChatResponse)
async def gemini_chat(
	payload: ChatRequest | None = None,
	service: ChatService = Depends(get_chat_service),
) -> ChatResponse | JSONResponse:
	try:
		reply = await service.reply(payload or ChatRequest())
	except Exception as exc:
		return _map_error(exc)
	return ChatResponse(reply=reply)
