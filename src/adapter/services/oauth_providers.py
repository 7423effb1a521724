"""
OAuth2 authorization code flow against the supported identity providers.

Each provider is an HttpxOAuthProvider configured with its endpoints and a
function that maps the provider's userinfo payload to an OAuthProfile.
"""

import logging
import urllib.parse
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import httpx

from src.app.services.oauth_provider import IOAuthProvider, OAuthProfile, OAuthProviderError
from src.domain.entities import OAuthProviderName

logger = logging.getLogger(__name__)


def _oidc_profile(data: Dict[str, Any]) -> OAuthProfile:
    return OAuthProfile(
        provider_id=str(data["sub"]),
        email=data.get("email"),
        email_verified=bool(data.get("email_verified", False)),
        given_name=data.get("given_name"),
        family_name=data.get("family_name"),
        display_name=data.get("name"),
        avatar=data.get("picture"),
    )


def _github_profile(data: Dict[str, Any]) -> OAuthProfile:
    return OAuthProfile(
        provider_id=str(data["id"]),
        email=data.get("email"),
        email_verified=bool(data.get("email_verified", False)),
        display_name=data.get("name") or data.get("login"),
        avatar=data.get("avatar_url"),
    )


def _microsoft_profile(data: Dict[str, Any]) -> OAuthProfile:
    # Graph does not assert ownership of mail/userPrincipalName
    return OAuthProfile(
        provider_id=str(data["id"]),
        email=data.get("mail") or data.get("userPrincipalName"),
        email_verified=False,
        given_name=data.get("givenName"),
        family_name=data.get("surname"),
        display_name=data.get("displayName"),
    )


@dataclass(frozen=True)
class ProviderEndpoints:
    authorize_url: str
    token_url: str
    userinfo_url: str
    scope: str
    parse_profile: Callable[[Dict[str, Any]], OAuthProfile]
    emails_url: Optional[str] = None


PROVIDER_ENDPOINTS: Dict[str, ProviderEndpoints] = {
    OAuthProviderName.google.value: ProviderEndpoints(
        authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
        token_url="https://oauth2.googleapis.com/token",
        userinfo_url="https://openidconnect.googleapis.com/v1/userinfo",
        scope="openid profile email",
        parse_profile=_oidc_profile,
    ),
    OAuthProviderName.github.value: ProviderEndpoints(
        authorize_url="https://github.com/login/oauth/authorize",
        token_url="https://github.com/login/oauth/access_token",
        userinfo_url="https://api.github.com/user",
        emails_url="https://api.github.com/user/emails",
        scope="read:user user:email",
        parse_profile=_github_profile,
    ),
    OAuthProviderName.microsoft.value: ProviderEndpoints(
        authorize_url="https://login.microsoftonline.com/common/oauth2/v2.0/authorize",
        token_url="https://login.microsoftonline.com/common/oauth2/v2.0/token",
        userinfo_url="https://graph.microsoft.com/v1.0/me",
        scope="openid profile email User.Read",
        parse_profile=_microsoft_profile,
    ),
    OAuthProviderName.linkedin.value: ProviderEndpoints(
        authorize_url="https://www.linkedin.com/oauth/v2/authorization",
        token_url="https://www.linkedin.com/oauth/v2/accessToken",
        userinfo_url="https://api.linkedin.com/v2/userinfo",
        scope="openid profile email",
        parse_profile=_oidc_profile,
    ),
}


class HttpxOAuthProvider(IOAuthProvider):
    def __init__(
        self,
        name: str,
        client_id: str,
        client_secret: str,
        endpoints: ProviderEndpoints,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.name = name
        self.client_id = client_id
        self.client_secret = client_secret
        self.endpoints = endpoints
        self.timeout = timeout
        self.transport = transport

    def authorization_url(self, state: str, redirect_uri: str) -> str:
        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "scope": self.endpoints.scope,
            "redirect_uri": redirect_uri,
            "state": state,
        }
        return f"{self.endpoints.authorize_url}?{urllib.parse.urlencode(params)}"

    async def fetch_profile(self, code: str, redirect_uri: str) -> OAuthProfile:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                token_response = await client.post(
                    self.endpoints.token_url,
                    data={
                        "grant_type": "authorization_code",
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "code": code,
                        "redirect_uri": redirect_uri,
                    },
                    headers={"Accept": "application/json"},
                )
                if token_response.status_code != 200:
                    raise OAuthProviderError(
                        f"{self.name} token exchange failed with status {token_response.status_code}"
                    )
                access_token = token_response.json().get("access_token")
                if not access_token:
                    raise OAuthProviderError(f"{self.name} token response has no access_token")

                headers = {
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/json",
                }
                userinfo_response = await client.get(self.endpoints.userinfo_url, headers=headers)
                if userinfo_response.status_code != 200:
                    raise OAuthProviderError(
                        f"{self.name} profile request failed with status {userinfo_response.status_code}"
                    )
                data = userinfo_response.json()

                if self.endpoints.emails_url:
                    emails_response = await client.get(self.endpoints.emails_url, headers=headers)
                    if emails_response.status_code == 200:
                        data = {**data, **_primary_email(emails_response.json())}
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("OAuth request to %s failed: %s", self.name, type(e).__name__)
            raise OAuthProviderError(f"{self.name} request failed") from e

        try:
            return self.endpoints.parse_profile(data)
        except KeyError as e:
            raise OAuthProviderError(f"{self.name} profile is missing {e}") from e


def _primary_email(emails: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Pick the primary address from GitHub's /user/emails listing"""
    for entry in emails:
        if entry.get("primary"):
            return {"email": entry.get("email"), "email_verified": bool(entry.get("verified"))}
    return {}


def build_oauth_providers(
    providers_config: Dict[str, Dict[str, str]],
    timeout: float = 10.0,
) -> Dict[str, IOAuthProvider]:
    """Register every supported provider that has credentials configured"""
    providers: Dict[str, IOAuthProvider] = {}
    for name, endpoints in PROVIDER_ENDPOINTS.items():
        credentials = providers_config.get(name) or {}
        client_id = credentials.get("client_id")
        client_secret = credentials.get("client_secret")
        if not client_id or not client_secret:
            continue
        providers[name] = HttpxOAuthProvider(
            name=name,
            client_id=client_id,
            client_secret=client_secret,
            endpoints=endpoints,
            timeout=timeout,
        )
    return providers
