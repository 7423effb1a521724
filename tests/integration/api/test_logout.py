import pytest
from httpx import AsyncClient

from tests.integration.helpers import PASSWORD, bearer


@pytest.mark.asyncio
async def test_logout_revokes_presented_token(client: AsyncClient, register):
    registered = await register()

    response = await client.post(
        "/auth/logout", json={"refreshToken": registered["refreshToken"]}
    )

    assert response.status_code == 200
    assert response.json()["status"] == "logged_out"

    refresh = await client.post(
        "/auth/refresh", json={"refreshToken": registered["refreshToken"]}
    )
    assert refresh.status_code == 401


@pytest.mark.asyncio
async def test_logout_keeps_other_sessions(client: AsyncClient, register):
    registered = await register()
    other = await client.post(
        "/auth/login", json={"email": "alice@example.com", "password": PASSWORD}
    )
    client.cookies.clear()

    await client.post("/auth/logout", json={"refreshToken": registered["refreshToken"]})

    refresh = await client.post(
        "/auth/refresh", json={"refreshToken": other.json()["refreshToken"]}
    )
    assert refresh.status_code == 200


@pytest.mark.asyncio
async def test_logout_without_token_succeeds(client: AsyncClient):
    response = await client.post("/auth/logout")

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_logout_with_unknown_token_succeeds(client: AsyncClient):
    response = await client.post("/auth/logout", json={"refreshToken": "unknown"})

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_logout_uses_cookie_and_clears_it(client: AsyncClient, register):
    await register()
    login = await client.post(
        "/auth/login", json={"email": "alice@example.com", "password": PASSWORD}
    )
    refresh_token = login.json()["refreshToken"]

    response = await client.post("/auth/logout")

    assert response.status_code == 200
    assert "refreshToken" not in client.cookies
    refresh = await client.post("/auth/refresh", json={"refreshToken": refresh_token})
    assert refresh.status_code == 401


@pytest.mark.asyncio
async def test_logout_is_audited(client: AsyncClient, register):
    registered = await register()

    await client.post("/auth/logout", json={"refreshToken": registered["refreshToken"]})

    activity = await client.get("/portal/activity", headers=bearer(registered["accessToken"]))
    assert activity.json()["events"][0]["action"] == "logout"
