"""Storage interface for crops and to-dos, with an in-memory backing."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from typing import Any, Generic, Protocol, TypeVar

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


def new_id() -> str:
	return str(uuid.uuid4())


class Repository(Protocol[ModelT]):
	async def list(self) -> list[ModelT]: ...

	async def create(self, fields: dict[str, Any]) -> ModelT: ...

	async def update(self, item_id: str, fields: dict[str, Any]) -> ModelT | None: ...

	async def delete(self, item_id: str) -> None: ...


class InMemoryRepository(Generic[ModelT]):
	"""Insertion-ordered collection keyed by a server-assigned ``id``.

	State lives for the lifetime of the process only. Updates merge the given
	fields over the stored entity; an ``id`` in the update is ignored.
	"""

	def __init__(self, model: type[ModelT], id_factory: Callable[[], str] = new_id) -> None:
		self.model = model
		self.id_factory = id_factory
		self._items: list[ModelT] = []

	async def list(self) -> list[ModelT]:
		return list(self._items)

	async def create(self, fields: dict[str, Any]) -> ModelT:
		item = self.model.model_validate({**fields, "id": self.id_factory()})
		self._items.append(item)
		return item

	async def update(self, item_id: str, fields: dict[str, Any]) -> ModelT | None:
		changes = {key: value for key, value in fields.items() if key != "id"}
		for index, current in enumerate(self._items):
			if current.id != item_id:  # type: ignore[attr-defined]
				continue
			updated = self.model.model_validate({**current.model_dump(), **changes})
			self._items[index] = updated
			return updated
		return None

	async def delete(self, item_id: str) -> None:
		self._items = [item for item in self._items if item.id != item_id]  # type: ignore[attr-defined]
