"""Pydantic schemas for the Gemini chat endpoint."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class Coordinates(BaseModel):
	lat: float | None = None
	lon: float | None = None


class ChatRequest(BaseModel):
	message: str = ""
	crop: str = ""
	coords: Coordinates | None = None
	weather: dict[str, Any] | None = None


class ChatResponse(BaseModel):
	reply: str
