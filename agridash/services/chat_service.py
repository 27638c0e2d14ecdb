"""Gemini chat relay: builds the contextual prompt and extracts the reply."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import structlog
from google import genai

from agridash.errors import ConfigurationError
from agridash.schemas.chat import ChatRequest, Coordinates

SYSTEM_PREAMBLE = "You are a helpful farming assistant."
CONTEXT_SEPARATOR = " | "
NO_REPLY = "No reply."

logger = structlog.get_logger("agridash.chat")


def _format_number(value: float) -> str:
	return str(int(value)) if value.is_integer() else str(value)


def _coords_line(coords: Coordinates | None) -> str:
	if coords is None or coords.lat is None or coords.lon is None:
		return ""
	return f"Coords: {_format_number(coords.lat)},{_format_number(coords.lon)}"


def build_prompt(
	message: str,
	crop: str = "",
	coords: Coordinates | None = None,
	weather: dict[str, Any] | None = None,
) -> str:
	context_lines = [
		SYSTEM_PREAMBLE,
		f"Crop: {crop}" if crop else "",
		_coords_line(coords),
		f"Weather: {json.dumps(weather, separators=(',', ':'), ensure_ascii=False)}" if weather else "",
	]
	context = CONTEXT_SEPARATOR.join(line for line in context_lines if line)
	return f"{context}\nUser: {message}".strip()


# Reply accessors differ between SDK releases; tried in order until one yields text.

def _text_attribute(result: Any) -> str | None:
	text = getattr(result, "text", None)
	return text if isinstance(text, str) and text else None


def _response_text_method(result: Any) -> str | None:
	accessor = getattr(getattr(result, "response", None), "text", None)
	if not callable(accessor):
		return None
	text = accessor()
	return text if isinstance(text, str) and text else None


def _first_candidate_parts(result: Any) -> str | None:
	candidates = getattr(result, "candidates", None) or []
	if not candidates:
		return None
	parts = getattr(getattr(candidates[0], "content", None), "parts", None) or []
	text = "".join(part.text for part in parts if isinstance(getattr(part, "text", None), str))
	return text or None


REPLY_EXTRACTORS: tuple[Callable[[Any], str | None], ...] = (
	_text_attribute,
	_response_text_method,
	_first_candidate_parts,
)


def extract_reply(result: Any) -> str:
	for extractor in REPLY_EXTRACTORS:
		text = extractor(result)
		if text:
			return text
	return NO_REPLY


class ChatService:
	def __init__(self, client: genai.Client | None, model: str = "gemini-2.0-flash"):
		self.client = client
		self.model = model

	async def reply(self, payload: ChatRequest) -> str:
		if self.client is None:
			raise ConfigurationError("GEMINI_API_KEY")

		prompt = build_prompt(
			payload.message,
			crop=payload.crop,
			coords=payload.coords,
			weather=payload.weather,
		)
		result = await self.client.aio.models.generate_content(
			model=self.model,
			contents=[{"role": "user", "parts": [{"text": prompt}]}],
		)
		reply = extract_reply(result)
		if reply == NO_REPLY:
			logger.warning("chat_empty_reply", model=self.model)
		return reply
