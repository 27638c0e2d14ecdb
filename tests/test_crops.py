from __future__ import annotations

import pytest
from httpx import AsyncClient

from agridash.schemas.resources import Crop
from agridash.services.repository import InMemoryRepository


@pytest.mark.asyncio
async def test_create_crop_assigns_id_and_defaults(client: AsyncClient) -> None:
    response = await client.post("/api/crops", json={"name": "Wheat"})

    assert response.status_code == 201
    body = response.json()
    assert body["id"]
    assert body["name"] == "Wheat"
    assert body["variety"] == ""


@pytest.mark.asyncio
async def test_create_crop_without_body_uses_defaults(client: AsyncClient) -> None:
    response = await client.post("/api/crops")

    assert response.status_code == 201
    assert response.json()["name"] == "Crop"


@pytest.mark.asyncio
async def test_list_crops_in_insertion_order(client: AsyncClient) -> None:
    for name in ("Maize", "Barley", "Sorghum"):
        await client.post("/api/crops", json={"name": name})

    response = await client.get("/api/crops")

    assert response.status_code == 200
    assert [crop["name"] for crop in response.json()] == ["Maize", "Barley", "Sorghum"]


@pytest.mark.asyncio
async def test_update_crop_merges_given_fields(client: AsyncClient) -> None:
    created = (await client.post("/api/crops", json={"name": "Tomato", "variety": "Roma"})).json()

    response = await client.put(f"/api/crops/{created['id']}", json={"variety": "San Marzano", "id": "hijack"})

    assert response.status_code == 200
    assert response.json() == {"id": created["id"], "name": "Tomato", "variety": "San Marzano"}


@pytest.mark.asyncio
async def test_update_unknown_crop_returns_null(client: AsyncClient) -> None:
    response = await client.put("/api/crops/does-not-exist", json={"name": "Rye"})

    assert response.status_code == 200
    assert response.json() is None


@pytest.mark.asyncio
async def test_delete_crop_and_unknown_id_are_204(client: AsyncClient) -> None:
    created = (await client.post("/api/crops", json={"name": "Oats"})).json()

    first = await client.delete(f"/api/crops/{created['id']}")
    again = await client.delete(f"/api/crops/{created['id']}")

    assert first.status_code == 204
    assert first.content == b""
    assert again.status_code == 204
    assert (await client.get("/api/crops")).json() == []


@pytest.mark.asyncio
async def test_repository_update_never_replaces_identifier() -> None:
    ids = iter(["crop-1", "crop-2"])
    repo: InMemoryRepository[Crop] = InMemoryRepository(Crop, id_factory=lambda: next(ids))
    await repo.create({"name": "Rice", "variety": ""})

    updated = await repo.update("crop-1", {"id": "crop-9", "name": "Basmati"})

    assert updated == Crop(id="crop-1", name="Basmati", variety="")
    assert await repo.update("crop-9", {"name": "x"}) is None
    assert [crop.id for crop in await repo.list()] == ["crop-1"]


@pytest.mark.asyncio
async def test_create_crop_with_wrong_field_type_is_400(client: AsyncClient) -> None:
    response = await client.post("/api/crops", json={"name": 5})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid request body"
    assert "name" in body["details"]
    assert (await client.get("/api/crops")).json() == []


@pytest.mark.asyncio
async def test_create_crop_with_malformed_json_is_400(client: AsyncClient) -> None:
    response = await client.post(
        "/api/crops",
        content=b'{"name": "Wheat"',
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request body"
