"""Tests for the user profile."""

import pytest
from httpx import AsyncClient

from app.config import settings


@pytest.mark.asyncio
async def test_profile_created_on_first_access(
    client: AsyncClient, registered_user: dict, auth_token: str
):
    response = await client.get(
        "/api/v1/profiles/me",
        headers={"Authorization": f"Bearer {auth_token}"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == registered_user["response"]["id"]
    assert data["email"] == registered_user["email"]
    assert data["role"] == "user"
    assert data["photo_url"] is None
    assert data["location"] is None


@pytest.mark.asyncio
async def test_profile_returned_on_later_access(client: AsyncClient, auth_token: str):
    headers = {"Authorization": f"Bearer {auth_token}"}

    first = await client.get("/api/v1/profiles/me", headers=headers)
    second = await client.get("/api/v1/profiles/me", headers=headers)

    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["created_at"] == first.json()["created_at"]


@pytest.mark.asyncio
async def test_update_profile_location(client: AsyncClient, auth_token: str):
    response = await client.put(
        "/api/v1/profiles/me",
        json={"location": "Lyon"},
        headers={"Authorization": f"Bearer {auth_token}"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["location"] == "Lyon"
    assert data["role"] == "user"


@pytest.mark.asyncio
async def test_update_profile_location_too_long(client: AsyncClient, auth_token: str):
    response = await client.put(
        "/api/v1/profiles/me",
        json={"location": "x" * 201},
        headers={"Authorization": f"Bearer {auth_token}"},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_upload_profile_photo(client: AsyncClient, registered_user: dict, auth_token: str):
    response = await client.post(
        "/api/v1/profiles/me/photo",
        files={"file": ("me.jpg", b"\xff\xd8\xff\xe0" + b"\x00" * 32, "image/jpeg")},
        headers={"Authorization": f"Bearer {auth_token}"},
    )

    assert response.status_code == 200
    photo_url = response.json()["photo_url"]
    user_id = registered_user["response"]["id"]
    assert photo_url.startswith(f"/uploads/profile-photos/{user_id}/")
    assert photo_url.endswith(".jpg")


@pytest.mark.asyncio
async def test_upload_profile_photo_empty(client: AsyncClient, auth_token: str):
    response = await client.post(
        "/api/v1/profiles/me/photo",
        files={"file": ("me.png", b"", "image/png")},
        headers={"Authorization": f"Bearer {auth_token}"},
    )

    assert response.status_code == 422
    assert response.json()["detail"] == "Uploaded file is empty"


@pytest.mark.asyncio
async def test_upload_profile_photo_too_large(client: AsyncClient, auth_token: str):
    response = await client.post(
        "/api/v1/profiles/me/photo",
        files={"file": ("big.png", b"\x00" * (settings.MAX_IMAGE_SIZE + 1), "image/png")},
        headers={"Authorization": f"Bearer {auth_token}"},
    )

    assert response.status_code == 422
    assert response.json()["field"] == "file"


@pytest.mark.asyncio
async def test_profile_requires_auth(client: AsyncClient):
    response = await client.get("/api/v1/profiles/me")

    assert response.status_code == 401
