from datetime import timedelta

import pytest
from httpx import AsyncClient

from src.domain.base import utcnow
from tests.integration.helpers import bearer


@pytest.mark.asyncio
async def test_verify_email(client: AsyncClient, register, email_sender):
    """Following the emailed link verifies the account

    Given I registered and received a verification email
    When I open the link
    Then I am redirected to the portal
    And my account is marked verified
    """
    registered = await register()
    token = email_sender.last_token("verification", "alice@example.com")

    response = await client.get("/auth/verify-email", params={"token": token})

    assert response.status_code == 307
    assert response.headers["location"] == "/portal?verified=true"

    me = await client.get("/auth/me", headers=bearer(registered["accessToken"]))
    assert me.json()["account"]["isVerified"] is True


@pytest.mark.asyncio
async def test_verification_token_is_single_use(client: AsyncClient, register, email_sender):
    await register()
    token = email_sender.last_token("verification", "alice@example.com")

    await client.get("/auth/verify-email", params={"token": token})
    response = await client.get("/auth/verify-email", params={"token": token})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_unknown_token(client: AsyncClient):
    response = await client.get("/auth/verify-email", params={"token": "nope"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_missing_token(client: AsyncClient):
    response = await client.get("/auth/verify-email")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_expired_token(client: AsyncClient, register, email_sender, set_account_fields):
    registered = await register()
    token = email_sender.last_token("verification", "alice@example.com")
    await set_account_fields(
        registered["account"]["id"],
        verification_expires_at=utcnow() - timedelta(minutes=1),
    )

    response = await client.get("/auth/verify-email", params={"token": token})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_verification_is_audited(client: AsyncClient, register, email_sender):
    registered = await register()
    token = email_sender.last_token("verification", "alice@example.com")

    await client.get("/auth/verify-email", params={"token": token})

    activity = await client.get("/portal/activity", headers=bearer(registered["accessToken"]))
    assert activity.json()["events"][0]["action"] == "email_verified"
