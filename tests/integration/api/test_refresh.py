import pytest
from httpx import AsyncClient
from sqlmodel import select

from src.domain.entities import RefreshToken
from tests.integration.helpers import PASSWORD, bearer


@pytest.mark.asyncio
async def test_successful_rotation(client: AsyncClient, register):
    """Refresh rotates the token

    Given I hold a refresh token
    When I exchange it
    Then I receive a new access token and a new refresh token
    """
    registered = await register()

    response = await client.post(
        "/auth/refresh", json={"refreshToken": registered["refreshToken"]}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["accessToken"]
    assert data["refreshToken"]
    assert data["refreshToken"] != registered["refreshToken"]

    me = await client.get("/auth/me", headers=bearer(data["accessToken"]))
    assert me.status_code == 200


@pytest.mark.asyncio
async def test_replay_after_rotation_fails(client: AsyncClient, register):
    """The first exchange succeeds, replaying the original value fails"""
    registered = await register()
    original = registered["refreshToken"]

    first = await client.post("/auth/refresh", json={"refreshToken": original})
    client.cookies.clear()
    replay = await client.post("/auth/refresh", json={"refreshToken": original})

    assert first.status_code == 200
    assert replay.status_code == 401
    assert replay.json()["error"]["code"] == "REFRESH_INVALID"

    # The rotated token is still good
    second = await client.post(
        "/auth/refresh", json={"refreshToken": first.json()["refreshToken"]}
    )
    assert second.status_code == 200


@pytest.mark.asyncio
async def test_refresh_from_cookie(client: AsyncClient, register):
    await register()
    login = await client.post(
        "/auth/login", json={"email": "alice@example.com", "password": PASSWORD}
    )
    assert login.status_code == 200

    # No body: the refreshToken cookie set by login is used
    response = await client.post("/auth/refresh")

    assert response.status_code == 200
    assert response.json()["refreshToken"] != login.json()["refreshToken"]


@pytest.mark.asyncio
async def test_unknown_token(client: AsyncClient):
    response = await client.post("/auth/refresh", json={"refreshToken": "not-a-real-token"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "REFRESH_INVALID"


@pytest.mark.asyncio
async def test_missing_token(client: AsyncClient):
    response = await client.post("/auth/refresh", json={})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "REFRESH_INVALID"


@pytest.mark.asyncio
async def test_expired_token(client: AsyncClient, register, db_session):
    from datetime import timedelta

    from sqlmodel import update

    from src.domain.base import utcnow

    registered = await register()
    await db_session.execute(
        update(RefreshToken).values(expires_at=utcnow() - timedelta(seconds=1))
    )
    await db_session.commit()

    response = await client.post(
        "/auth/refresh", json={"refreshToken": registered["refreshToken"]}
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "REFRESH_INVALID"


@pytest.mark.asyncio
async def test_token_list_is_capped(client: AsyncClient, register, load_account, db_session):
    """Each account keeps at most 5 refresh tokens, oldest evicted first"""
    registered = await register()
    tokens = [registered["refreshToken"]]
    for _ in range(5):
        response = await client.post(
            "/auth/login", json={"email": "alice@example.com", "password": PASSWORD}
        )
        tokens.append(response.json()["refreshToken"])
    client.cookies.clear()

    account = await load_account(registered["account"]["id"])
    stored = (
        await db_session.exec(
            select(RefreshToken).where(RefreshToken.account_id == account.id)
        )
    ).all()
    assert len(stored) == 5

    evicted = await client.post("/auth/refresh", json={"refreshToken": tokens[0]})
    newest = await client.post("/auth/refresh", json={"refreshToken": tokens[-1]})
    assert evicted.status_code == 401
    assert newest.status_code == 200


@pytest.mark.asyncio
async def test_deactivated_account_cannot_refresh(
    client: AsyncClient, register, set_account_fields
):
    registered = await register()
    await set_account_fields(registered["account"]["id"], is_active=False)

    response = await client.post(
        "/auth/refresh", json={"refreshToken": registered["refreshToken"]}
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "REFRESH_INVALID"
