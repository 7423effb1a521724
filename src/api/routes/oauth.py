"""
OAuth routes: /auth/{provider} starts the authorization code flow and
/auth/{provider}/callback finishes it.

A random state is kept in a short-lived httponly cookie and must come back
unchanged from the provider.
"""

import logging
import secrets
import urllib.parse
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse

from libs.result import Error
from src.api.error import ClientError
from src.api.utils.cookies import (
    OAUTH_STATE_COOKIE,
    clear_oauth_state_cookie,
    set_auth_cookies,
    set_oauth_state_cookie,
)
from src.app.services.audit_logger import AuditLogger, ClientInfo
from src.app.services.oauth_provider import IOAuthProvider
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import OAuthLoginUseCase
from src.depends import (
    get_audit_logger,
    get_client_info,
    get_oauth_providers,
    get_settings,
    get_token_issuer,
    get_unit_of_work,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["OAuth"])


def _provider_or_404(providers: Dict[str, IOAuthProvider], name: str) -> IOAuthProvider:
    provider = providers.get(name)
    if provider is None:
        raise ClientError(
            Error("PROVIDER_NOT_FOUND", f"Unknown sign-in provider: {name}"),
            status_code=status.HTTP_404_NOT_FOUND,
        )
    return provider


def _callback_uri(config, provider: str) -> str:
    return f"{config.BASE_URL}{config.API_PREFIX}/auth/{provider}/callback"


def _failure_redirect(config) -> RedirectResponse:
    response = RedirectResponse(
        url=f"{config.LOGIN_URL}?error=oauth_failed", status_code=status.HTTP_302_FOUND
    )
    clear_oauth_state_cookie(response, config)
    return response


@router.get("/{provider}")
async def oauth_start(
    provider: str,
    providers: Dict[str, IOAuthProvider] = Depends(get_oauth_providers),
    config=Depends(get_settings),
):
    """Redirect the browser to the provider's consent page"""
    oauth_provider = _provider_or_404(providers, provider)

    state = secrets.token_urlsafe(24)
    response = RedirectResponse(
        url=oauth_provider.authorization_url(state, _callback_uri(config, provider)),
        status_code=status.HTTP_302_FOUND,
    )
    set_oauth_state_cookie(response, state, config)
    return response


@router.get("/{provider}/callback")
async def oauth_callback(
    provider: str,
    request: Request,
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    providers: Dict[str, IOAuthProvider] = Depends(get_oauth_providers),
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    audit_logger: AuditLogger = Depends(get_audit_logger),
    client: ClientInfo = Depends(get_client_info),
    config=Depends(get_settings),
):
    """
    Finish the OAuth flow.

    Redirects to the portal with the access token in the query string and
    auth cookies set, or to the login page with error=oauth_failed.

    Raises:
        - 404 Not Found: PROVIDER_NOT_FOUND
        - 502 Bad Gateway: TRANSIENT (provider unreachable)
    """
    oauth_provider = _provider_or_404(providers, provider)

    expected_state = request.cookies.get(OAUTH_STATE_COOKIE)
    if error or not code:
        logger.warning(f"OAuth via {provider} returned no code: {error or 'missing code'}")
        return _failure_redirect(config)
    if not state or not expected_state or not secrets.compare_digest(
        state.encode(), expected_state.encode()
    ):
        logger.warning(f"OAuth via {provider} failed state check")
        return _failure_redirect(config)

    use_case = OAuthLoginUseCase(
        uow, token_issuer, audit_logger, account_id_prefix=config.ACCOUNT_ID_PREFIX
    )
    result = await use_case.execute(
        oauth_provider, code, _callback_uri(config, provider), client
    )

    if result.is_err():
        return _failure_redirect(config)

    query = urllib.parse.urlencode({"token": result.value.access_token})
    response = RedirectResponse(
        url=f"{config.PORTAL_URL}?{query}", status_code=status.HTTP_302_FOUND
    )
    set_auth_cookies(response, result.value.access_token, result.value.refresh_token, config)
    clear_oauth_state_cookie(response, config)
    return response
