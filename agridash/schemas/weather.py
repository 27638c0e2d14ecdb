"""Pydantic schemas for the weather proxy."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class WeatherSummary(BaseModel):
	"""Compact card shown on the dashboard, derived from an OpenWeather payload."""

	title: str
	temp: int
	desc: str
	humidity: float
	wind: float

	@classmethod
	def from_payload(cls, payload: dict[str, Any]) -> WeatherSummary:
		main = payload.get("main") or {}
		conditions = payload.get("weather") or []
		first = conditions[0] if conditions and isinstance(conditions[0], dict) else {}
		wind = payload.get("wind") or {}
		return cls(
			title=payload.get("name") or "Local",
			temp=round(main.get("temp") or 0),
			desc=first.get("description") or "",
			humidity=main.get("humidity") or 0,
			wind=wind.get("speed") or 0,
		)
