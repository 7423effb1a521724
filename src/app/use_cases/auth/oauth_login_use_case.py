"""
OAuth Login Use Case

Completes the authorization code flow: fetches the provider profile,
reconciles it with a local account and issues tokens.
"""

import logging
from typing import Optional

from libs.result import Error, Result, Return
from src.app.services.account_id_generator import AccountIdGenerator
from src.app.services.audit_logger import AuditLogger, ClientInfo
from src.app.services.oauth_linker import OAuthLinker
from src.app.services.oauth_provider import IOAuthProvider
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.account_view import build_account_view
from src.domain.base import utcnow
from src.domain.entities import SecurityAction
from .dtos import AuthResponse

logger = logging.getLogger(__name__)


class OAuthLoginUseCase:
    """
    Use case for signing in through an external identity provider.

    Business Rules:
    - Provider HTTP failures propagate as OAuthProviderError (transient)
    - Reconcile: provider identity first, then verified email, else create
    - Deactivated accounts cannot sign in
    - Success resets lockout state and bumps login tracking, like a
      password login, and records oauth_login
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_issuer: TokenIssuer,
        audit_logger: AuditLogger,
        account_id_prefix: str = "AIGNC",
    ):
        self.uow = uow
        self.token_issuer = token_issuer
        self.audit_logger = audit_logger
        self.account_id_prefix = account_id_prefix

    async def execute(
        self,
        provider: IOAuthProvider,
        code: str,
        redirect_uri: str,
        client: Optional[ClientInfo] = None,
    ) -> Result[AuthResponse]:
        """
        Execute OAuth login use case.

        Returns:
            Result with AuthResponse, or Error EMAIL_REQUIRED /
            DUPLICATE_EMAIL / ACCOUNT_DEACTIVATED

        Raises:
            OAuthProviderError: the provider could not complete the exchange
        """
        profile = await provider.fetch_profile(code, redirect_uri)

        async with self.uow:
            linker = OAuthLinker(
                self.uow,
                self.audit_logger,
                AccountIdGenerator(self.uow.accounts, self.account_id_prefix),
            )
            reconciled = await linker.reconcile(provider.name, profile, client)
            if reconciled.is_err():
                logger.warning(
                    "OAuth reconcile via %s failed: %s", provider.name, reconciled.error.code
                )
                return Return.err(reconciled.error)
            account = reconciled.value

            if not account.is_active:
                return Return.err(
                    Error(
                        "ACCOUNT_DEACTIVATED",
                        "Your account has been deactivated. Please contact support.",
                    )
                )

            await self.uow.accounts.record_successful_login(account.id, utcnow())
            tokens = await self.token_issuer.issue(account)

            await self.audit_logger.record(
                SecurityAction.oauth_login,
                account_id=account.id,
                client=client,
                metadata={"provider": provider.name},
            )

            links = await self.uow.provider_links.get_by_account_id(account.id)
            response = AuthResponse(
                account=build_account_view(account, links),
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
            )

            await self.uow.commit()

            return Return.ok(response)
