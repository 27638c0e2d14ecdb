"""Pydantic schemas for crops and to-dos."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Crop(BaseModel):
	id: str
	name: str
	variety: str = ""


class CropCreate(BaseModel):
	name: str = "Crop"
	variety: str = ""


class CropUpdate(BaseModel):
	name: str | None = None
	variety: str | None = None

	def changes(self) -> dict[str, Any]:
		return self.model_dump(exclude_unset=True, exclude_none=True)


class Todo(BaseModel):
	"""A task; ``cropId`` is a weak reference to a crop that may no longer exist."""

	model_config = ConfigDict(populate_by_name=True)

	id: str
	title: str
	crop_id: str | None = Field(default=None, alias="cropId")
	when: str | None = None
	done: bool = False


class TodoCreate(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	title: str = "Task"
	crop_id: str | None = Field(default=None, alias="cropId")
	when: str | None = Field(default=None, description="Local datetime, e.g. 2025-05-01T07:30")


class TodoUpdate(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	title: str | None = None
	crop_id: str | None = Field(default=None, alias="cropId")
	when: str | None = None
	done: bool | None = None

	def changes(self) -> dict[str, Any]:
		# cropId / when may be cleared with an explicit null; title / done may not.
		fields = self.model_dump(exclude_unset=True)
		return {
			key: value
			for key, value in fields.items()
			if value is not None or key in {"crop_id", "when"}
		}
