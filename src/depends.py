"""
Dependency providers.

Every collaborator is built once in create_app and kept on app.state; the
providers below only hand them out, so tests can swap any of them through
app.dependency_overrides.
"""

from datetime import timedelta
from typing import Dict, Optional

from fastapi import Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from libs.result import Error
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.utils.client_info import get_client_info as _client_info
from src.api.utils.cookies import ACCESS_COOKIE
from src.api.utils.jwt import AccessTokenCodec
from src.app.services.audit_logger import AuditLogger, ClientInfo
from src.app.services.email_sender import IEmailSender
from src.app.services.lockout_policy import LockoutPolicy
from src.app.services.oauth_provider import IOAuthProvider
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.account_view import CurrentAccount

security = HTTPBearer(auto_error=False)


def get_settings(request: Request):
    return request.app.state.config


async def get_unit_of_work(request: Request):
    async with request.app.state.session_factory() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_password_hasher(request: Request) -> IPasswordHasher:
    return request.app.state.password_hasher


def get_access_token_codec(request: Request) -> AccessTokenCodec:
    return request.app.state.access_token_codec


def get_email_sender(request: Request) -> IEmailSender:
    return request.app.state.email_sender


def get_oauth_providers(request: Request) -> Dict[str, IOAuthProvider]:
    return request.app.state.oauth_providers


def get_lockout_policy(request: Request) -> LockoutPolicy:
    return request.app.state.lockout_policy


def get_client_info(request: Request) -> ClientInfo:
    return _client_info(request)


def get_token_issuer(
    uow: UnitOfWork = Depends(get_unit_of_work),
    codec: AccessTokenCodec = Depends(get_access_token_codec),
    config=Depends(get_settings),
) -> TokenIssuer:
    return TokenIssuer(
        uow,
        codec,
        refresh_token_lifetime=timedelta(days=config.REFRESH_TOKEN_EXPIRES_DAYS),
        max_refresh_tokens=config.MAX_REFRESH_TOKENS,
    )


def get_audit_logger(uow: UnitOfWork = Depends(get_unit_of_work)) -> AuditLogger:
    return AuditLogger(uow)


def _unauthenticated(message: str = "Not authenticated") -> ClientError:
    return ClientError(
        Error("UNAUTHENTICATED", message), status_code=status.HTTP_401_UNAUTHORIZED
    )


async def get_current_account(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    uow: UnitOfWork = Depends(get_unit_of_work),
    codec: AccessTokenCodec = Depends(get_access_token_codec),
) -> CurrentAccount:
    """
    Session guard for protected routes.

    The token comes from the Authorization header, else from the token
    cookie. The account is re-read on every request so deactivation and
    role or plan changes take effect immediately.

    Raises:
        ClientError: 401 UNAUTHENTICATED / TOKEN_EXPIRED / INVALID_TOKEN /
            ACCOUNT_DEACTIVATED
    """
    token = credentials.credentials if credentials else request.cookies.get(ACCESS_COOKIE)
    if not token:
        raise _unauthenticated()

    decoded = codec.decode(token)
    if decoded.is_err():
        raise ClientError(decoded.error, status_code=status.HTTP_401_UNAUTHORIZED)

    async with uow:
        account = await uow.accounts.get_by_id(decoded.value)
        if account is None:
            raise _unauthenticated("Account no longer exists")
        if not account.is_active:
            raise ClientError(
                Error(
                    "ACCOUNT_DEACTIVATED",
                    "Your account has been deactivated. Please contact support.",
                ),
                status_code=status.HTTP_401_UNAUTHORIZED,
            )
        return CurrentAccount.from_account(account)
