import pytest
from fastapi import status
from httpx import AsyncClient

from home_inventory.features.auth.security import get_password_hash, verify_password


# test password hashing and verification
def test_password_hashing():
    password = "test_password"
    hashed = get_password_hash(password)
    assert verify_password(password, hashed) is True
    assert verify_password("wrong_password", hashed) is False
    assert hashed != password


# test that hashing is salted
def test_password_hash_is_salted():
    hashed1 = get_password_hash("test_password")
    hashed2 = get_password_hash("test_password")
    assert hashed1 != hashed2, "Hashing the same password should yield different hashes"


@pytest.mark.asyncio
async def test_login_returns_bearer_token(client: AsyncClient, make_user):
    await make_user("alice")

    response = await client.post(
        "/api/v1/auth/token", data={"username": "alice", "password": "password123"}
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["token_type"] == "bearer"

    report = await client.get(
        "/api/v1/reports/inventory",
        headers={"Authorization": f"Bearer {body['access_token']}"},
    )
    assert report.status_code == status.HTTP_200_OK
    assert report.json()["data"]["statistics"]["total_items"] == 0


@pytest.mark.asyncio
async def test_login_with_wrong_password(client: AsyncClient, make_user):
    await make_user("alice")

    response = await client.post(
        "/api/v1/auth/token", data={"username": "alice", "password": "not-the-password"}
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_register_user(client: AsyncClient):
    response = await client.post(
        "/api/v1/auth/register",
        json={"username": "newcomer", "email": "newcomer@example.com", "password": "longenough1"},
    )

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["username"] == "newcomer"
    assert body["is_active"] is True
    assert "hashed_password" not in body


@pytest.mark.asyncio
async def test_register_duplicate_username(client: AsyncClient, make_user):
    await make_user("alice")

    response = await client.post(
        "/api/v1/auth/register",
        json={"username": "alice", "email": "another@example.com", "password": "longenough1"},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Username already registered"


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client: AsyncClient):
    response = await client.get(
        "/api/v1/reports/inventory", headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
