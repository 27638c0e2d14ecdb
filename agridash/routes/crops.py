"""Crop CRUD routes (in-memory)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from agridash.dependencies import get_crop_repository
from agridash.schemas.resources import Crop, CropCreate, CropUpdate
from agridash.services.repository import Repository

router = APIRouter(prefix="/crops", tags=["crops"])


@router.get("", response_model=list[Crop])
async def list_crops(repo: Repository[Crop] = Depends(get_crop_repository)) -> list[Crop]:
	return await repo.list()


@router.post("", response_model=Crop, status_code=status.HTTP_201_CREATED)
async def create_crop(
	payload: CropCreate | None = None,
	repo: Repository[Crop] = Depends(get_crop_repository),
) -> Crop:
	payload = payload or CropCreate()
	return await repo.create(payload.model_dump())


@router.put("/{crop_id}", response_model=Crop | None)
async def update_crop(
	crop_id: str,
	payload: CropUpdate | None = None,
	repo: Repository[Crop] = Depends(get_crop_repository),
) -> Crop | None:
	return await repo.update(crop_id, payload.changes() if payload else {})


@router.delete("/{crop_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_crop(
	crop_id: str,
	repo: Repository[Crop] = Depends(get_crop_repository),
) -> Response:
	await repo.delete(crop_id)
	return Response(status_code=status.HTTP_204_NO_CONTENT)
