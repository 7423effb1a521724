import urllib.parse

import pytest
from httpx import AsyncClient
from sqlmodel import func, select

from src.app.services.oauth_provider import OAuthProfile
from src.domain.entities import Account, ProviderLink
from tests.integration.helpers import bearer


def _query(location: str) -> dict:
    return dict(urllib.parse.parse_qsl(urllib.parse.urlparse(location).query))


async def oauth_sign_in(client: AsyncClient, provider, code: str, profile=None):
    """Walk the redirect dance: start, then come back with the code"""
    if profile is not None:
        provider.profiles[code] = profile

    start = await client.get(f"/auth/{provider.name}")
    assert start.status_code == 302
    state = _query(start.headers["location"])["state"]

    return await client.get(
        f"/auth/{provider.name}/callback", params={"code": code, "state": state}
    )


def bob_profile(**overrides) -> OAuthProfile:
    fields = dict(
        provider_id="google-bob",
        email="bob@example.com",
        email_verified=True,
        given_name="Bob",
        family_name="Jones",
        avatar="https://img.example/bob.png",
    )
    fields.update(overrides)
    return OAuthProfile(**fields)


async def count(db_session, model) -> int:
    result = await db_session.exec(select(func.count()).select_from(model))
    return result.one()


@pytest.mark.asyncio
async def test_first_sign_in_creates_account(client: AsyncClient, google):
    """An unseen identity with an email gets a new, pre-verified account

    Given no account for bob@example.com
    When Bob signs in with Google
    Then he is redirected to the portal with an access token
    And the account is verified, has no password and links google
    """
    response = await oauth_sign_in(client, google, "code-1", bob_profile())

    assert response.status_code == 302
    location = response.headers["location"]
    assert location.startswith("/portal?")
    token = _query(location)["token"]

    me = await client.get("/auth/me", headers=bearer(token))
    account = me.json()["account"]
    assert account["email"] == "bob@example.com"
    assert account["firstName"] == "Bob"
    assert account["isVerified"] is True
    assert account["providers"] == ["google"]
    assert account["organization"]["name"] == "Bob's Organization"
    assert account["organization"]["slug"] == "bob-s-organization"


@pytest.mark.asyncio
async def test_repeat_sign_in_reuses_account(client: AsyncClient, google, db_session):
    """Reconcile twice: one account, one provider link"""
    first = await oauth_sign_in(client, google, "code-1", bob_profile())
    second = await oauth_sign_in(client, google, "code-2", bob_profile())

    assert first.status_code == second.status_code == 302
    assert await count(db_session, Account) == 1
    assert await count(db_session, ProviderLink) == 1

    token = _query(second.headers["location"])["token"]
    activity = await client.get("/portal/activity", headers=bearer(token))
    actions = [e["action"] for e in activity.json()["events"]]
    assert actions == ["oauth_login", "oauth_login", "register"]


@pytest.mark.asyncio
async def test_sign_in_links_existing_password_account(client: AsyncClient, google, register):
    """A verified provider email attaches the provider to the existing account"""
    registered = await register("alice@example.com")

    response = await oauth_sign_in(
        client,
        google,
        "code-1",
        bob_profile(provider_id="google-alice", email="Alice@Example.com", given_name="Alice"),
    )

    token = _query(response.headers["location"])["token"]
    me = await client.get("/auth/me", headers=bearer(token))
    account = me.json()["account"]
    assert account["id"] == registered["account"]["id"]
    assert account["providers"] == ["google"]

    activity = await client.get("/portal/activity", headers=bearer(token))
    actions = [e["action"] for e in activity.json()["events"]]
    assert actions[:2] == ["oauth_login", "oauth_link"]


@pytest.mark.asyncio
async def test_unverified_email_does_not_take_over_account(
    client: AsyncClient, google, register, db_session
):
    await register("alice@example.com")

    response = await oauth_sign_in(
        client,
        google,
        "code-1",
        bob_profile(provider_id="google-mallory", email="alice@example.com", email_verified=False),
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/login?error=oauth_failed"
    assert await count(db_session, ProviderLink) == 0


@pytest.mark.asyncio
async def test_profile_without_email_is_rejected(client: AsyncClient, google, db_session):
    response = await oauth_sign_in(client, google, "code-1", bob_profile(email=None))

    assert response.status_code == 302
    assert response.headers["location"] == "/login?error=oauth_failed"
    assert await count(db_session, Account) == 0


@pytest.mark.asyncio
async def test_state_mismatch_is_rejected(client: AsyncClient, google):
    google.profiles["code-1"] = bob_profile()
    await client.get("/auth/google")

    response = await client.get(
        "/auth/google/callback", params={"code": "code-1", "state": "forged"}
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/login?error=oauth_failed"


@pytest.mark.asyncio
async def test_provider_denied_consent(client: AsyncClient, google):
    start = await client.get("/auth/google")
    state = _query(start.headers["location"])["state"]

    response = await client.get(
        "/auth/google/callback", params={"error": "access_denied", "state": state}
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/login?error=oauth_failed"


@pytest.mark.asyncio
async def test_provider_failure_is_transient(client: AsyncClient, google):
    response = await oauth_sign_in(client, google, "unknown-code")

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "TRANSIENT"


@pytest.mark.asyncio
async def test_unconfigured_provider(client: AsyncClient):
    response = await client.get("/auth/github")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "PROVIDER_NOT_FOUND"


@pytest.mark.asyncio
async def test_deactivated_account_cannot_sign_in(
    client: AsyncClient, google, set_account_fields
):
    first = await oauth_sign_in(client, google, "code-1", bob_profile())
    token = _query(first.headers["location"])["token"]
    me = await client.get("/auth/me", headers=bearer(token))
    await set_account_fields(me.json()["account"]["id"], is_active=False)

    response = await oauth_sign_in(client, google, "code-2", bob_profile())

    assert response.headers["location"] == "/login?error=oauth_failed"
