"""To-do CRUD routes (in-memory)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from agridash.dependencies import get_todo_repository
from agridash.schemas.resources import Todo, TodoCreate, TodoUpdate
from agridash.services.repository import Repository

router = APIRouter(prefix="/todos", tags=["todos"])


@router.get("", response_model=list[Todo])
async def list_todos(repo: Repository[Todo] = Depends(get_todo_repository)) -> list[Todo]:
	return await repo.list()


@router.post("", response_model=Todo, status_code=status.HTTP_201_CREATED)
async def create_todo(
	payload: TodoCreate | None = None,
	repo: Repository[Todo] = Depends(get_todo_repository),
) -> Todo:
	payload = payload or TodoCreate()
	return await repo.create({**payload.model_dump(), "done": False})


@router.put("/{todo_id}", response_model=Todo | None)
async def update_todo(
	todo_id: str,
	payload: TodoUpdate | None = None,
	repo: Repository[Todo] = Depends(get_todo_repository),
) -> Todo | None:
	return await repo.update(todo_id, payload.changes() if payload else {})


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_todo(
	todo_id: str,
	repo: Repository[Todo] = Depends(get_todo_repository),
) -> Response:
	await repo.delete(todo_id)
	return Response(status_code=status.HTTP_204_NO_CONTENT)
