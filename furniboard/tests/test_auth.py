from datetime import timedelta

import pytest

from furniboard.common.security import create_access_token, decode_token
from furniboard.config import settings


@pytest.mark.asyncio
async def test_validate_returns_token(client, auth_password):
    response = await client.post("/api/v1/auth/validate", json={"password": auth_password})
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"

    payload = decode_token(data["token"])
    assert payload["authenticated"] is True
    assert payload["type"] == "access"


@pytest.mark.asyncio
async def test_validate_wrong_password(client):
    response = await client.post("/api/v1/auth/validate", json={"password": "nope"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_validate_empty_password(client):
    response = await client.post("/api/v1/auth/validate", json={"password": ""})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_validate_without_configured_password(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_PASSWORD", "")
    response = await client.post("/api/v1/auth/validate", json={"password": "anything"})
    assert response.status_code == 500


@pytest.mark.asyncio
async def test_token_unlocks_admin_routes(client, auth_password):
    login = await client.post("/api/v1/auth/validate", json={"password": auth_password})
    token = login.json()["token"]

    response = await client.get(
        "/api/v1/quotes/admin/stats",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_admin_route_without_token(client):
    response = await client.get("/api/v1/quotes/admin")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_route_with_bad_token(client):
    response = await client.get(
        "/api/v1/contacts/admin",
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_route_with_expired_token(client):
    token = create_access_token({"authenticated": True}, expires_delta=timedelta(minutes=-1))
    response = await client.get(
        "/api/v1/contacts/admin",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
