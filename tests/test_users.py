import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_signup_success(client: AsyncClient):
    """Successful signup returns 201 and correct user data (no password in response)"""
    payload = {
        "email": "newuser123@example.com",
        "password": "strongpass123",
    }
    response = await client.post("/profile/signup", json=payload)

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == payload["email"]
    assert "id" in data
    assert "password" not in data


@pytest.mark.asyncio
async def test_signup_duplicate_email(client: AsyncClient):
    """Duplicate email returns 409 Conflict"""
    payload = {
        "email": "duplicate@example.com",
        "password": "pass12345678",
    }
    # First signup
    await client.post("/profile/signup", json=payload)
    # Second attempt
    response = await client.post("/profile/signup", json=payload)

    assert response.status_code == 409
    assert response.json()["detail"] == "User already exists"


@pytest.mark.asyncio
async def test_signup_invalid_data(client: AsyncClient):
    """Invalid payload returns 422 Unprocessable Entity"""
    payload = {"email": "not-an-email", "password": "short"}
    response = await client.post("/profile/signup", json=payload)

    assert response.status_code == 422
    assert "detail" in response.json()


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient):
    """Login returns 200 with access_token"""
    # First create user
    payload = {
        "email": "loginuser@example.com",
        "password": "validpass123",
    }
    await client.post("/profile/signup", json=payload)

    # Then login
    response = await client.post("/profile/login", json=payload)

    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"
    assert len(data["access_token"]) > 20


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_user):
    payload = {"email": test_user.email, "password": "wrongpass123"}
    response = await client.post("/profile/login", json=payload)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_unknown_user(client: AsyncClient):
    payload = {"email": "nobody@example.com", "password": "whatever123"}
    response = await client.post("/profile/login", json=payload)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_login_token_can_analyze(client: AsyncClient):
    """A token from /profile/login is accepted by the analysis endpoint"""
    payload = {"email": "analyst@example.com", "password": "validpass123"}
    await client.post("/profile/signup", json=payload)
    token = (await client.post("/profile/login", json=payload)).json()["access_token"]

    response = await client.post(
        "/hotels/analyze",
        json={
            "url": "https://example.com",
            "name": "Grand Hotel",
            "location": "Paris, France",
        },
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_me(client: AsyncClient, auth_headers_user, test_user):
    response = await client.get("/profile/me", headers=auth_headers_user)
    assert response.status_code == 200
    assert response.json()["id"] == str(test_user.id)


@pytest.mark.asyncio
async def test_me_unauthorized(client: AsyncClient):
    """401 when no auth header"""
    response = await client.get("/profile/me")
    assert response.status_code == 401
