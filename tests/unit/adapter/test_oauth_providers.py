import httpx
import pytest

from src.adapter.services.oauth_providers import (
    PROVIDER_ENDPOINTS,
    HttpxOAuthProvider,
    build_oauth_providers,
)
from src.app.services.oauth_provider import OAuthProviderError

REDIRECT_URI = "http://test/auth/callback"


def make_provider(name: str, handler) -> HttpxOAuthProvider:
    return HttpxOAuthProvider(
        name=name,
        client_id="client-id",
        client_secret="client-secret",
        endpoints=PROVIDER_ENDPOINTS[name],
        transport=httpx.MockTransport(handler),
    )


def test_authorization_url_carries_state_and_redirect():
    provider = make_provider("google", lambda request: httpx.Response(500))

    url = httpx.URL(provider.authorization_url("state-123", REDIRECT_URI))

    assert url.host == "accounts.google.com"
    assert url.params["state"] == "state-123"
    assert url.params["redirect_uri"] == REDIRECT_URI
    assert url.params["response_type"] == "code"
    assert "email" in url.params["scope"]


@pytest.mark.asyncio
async def test_google_profile():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "oauth2.googleapis.com":
            assert b"code=auth-code" in request.content
            return httpx.Response(200, json={"access_token": "at"})
        assert request.headers["Authorization"] == "Bearer at"
        return httpx.Response(200, json={
            "sub": "1234",
            "email": "bob@example.com",
            "email_verified": True,
            "given_name": "Bob",
            "family_name": "Jones",
            "picture": "https://img.example/bob.png",
        })

    profile = await make_provider("google", handler).fetch_profile("auth-code", REDIRECT_URI)

    assert profile.provider_id == "1234"
    assert profile.email == "bob@example.com"
    assert profile.email_verified is True
    assert profile.first_name == "Bob"
    assert profile.avatar == "https://img.example/bob.png"


@pytest.mark.asyncio
async def test_github_uses_primary_verified_email():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/login/oauth/access_token":
            return httpx.Response(200, json={"access_token": "at"})
        if request.url.path == "/user/emails":
            return httpx.Response(200, json=[
                {"email": "old@example.com", "primary": False, "verified": True},
                {"email": "bob@example.com", "primary": True, "verified": True},
            ])
        return httpx.Response(200, json={
            "id": 42, "login": "bobj", "name": "Bob Jones", "email": None,
        })

    profile = await make_provider("github", handler).fetch_profile("code", REDIRECT_URI)

    assert profile.provider_id == "42"
    assert profile.email == "bob@example.com"
    assert profile.email_verified is True
    assert profile.first_name == "Bob"
    assert profile.last_name == "Jones"


@pytest.mark.asyncio
async def test_microsoft_email_is_not_trusted():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            return httpx.Response(200, json={"access_token": "at"})
        return httpx.Response(200, json={
            "id": "ms-1", "mail": "bob@example.com", "givenName": "Bob", "surname": "Jones",
        })

    profile = await make_provider("microsoft", handler).fetch_profile("code", REDIRECT_URI)

    assert profile.email == "bob@example.com"
    assert profile.email_verified is False


@pytest.mark.asyncio
async def test_rejected_code_exchange():
    provider = make_provider("google", lambda request: httpx.Response(400, json={}))

    with pytest.raises(OAuthProviderError):
        await provider.fetch_profile("bad-code", REDIRECT_URI)


@pytest.mark.asyncio
async def test_network_error_becomes_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(OAuthProviderError):
        await make_provider("google", handler).fetch_profile("code", REDIRECT_URI)


@pytest.mark.asyncio
async def test_profile_missing_identifier():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            return httpx.Response(200, json={"access_token": "at"})
        return httpx.Response(200, json={"email": "bob@example.com"})

    with pytest.raises(OAuthProviderError):
        await make_provider("google", handler).fetch_profile("code", REDIRECT_URI)


def test_only_configured_providers_are_built():
    providers = build_oauth_providers({
        "google": {"client_id": "id", "client_secret": "secret"},
        "github": {"client_id": "id"},
    })

    assert list(providers) == ["google"]
