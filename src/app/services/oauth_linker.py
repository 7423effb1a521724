"""
OAuth Linker

Reconciles an external provider identity with a local account.

Algorithm:
1. Look up by exact (provider, provider_id)
2. Otherwise, if the provider reports a verified email, look up by email
   (links a new provider to an existing account)
3. Found: attach the provider link if missing and emit oauth_link
4. Not found: email is required; create a new, pre-verified account with a
   fresh public ID and a single provider link, emit register (method=oauth)
"""

from typing import Optional

from libs.result import Error, Result, Return
from src.app.repositories.account_repository import DuplicateEmailError
from src.app.repositories.provider_link_repository import DuplicateProviderLinkError
from src.app.services.account_id_generator import AccountIdGenerator
from src.app.services.audit_logger import AuditLogger, ClientInfo
from src.app.services.oauth_provider import OAuthProfile
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Account, ProviderLink, SecurityAction
from src.domain.validation import normalize_email, slugify


class OAuthLinker:
    def __init__(
        self,
        uow: UnitOfWork,
        audit_logger: AuditLogger,
        id_generator: AccountIdGenerator,
    ):
        self.uow = uow
        self.audit_logger = audit_logger
        self.id_generator = id_generator

    async def reconcile(
        self,
        provider: str,
        profile: OAuthProfile,
        client: Optional[ClientInfo] = None,
    ) -> Result[Account]:
        email = None
        if profile.email:
            email_result = normalize_email(profile.email)
            if email_result.is_ok():
                email = email_result.value

        account = await self.uow.accounts.get_by_provider_identity(
            provider, profile.provider_id
        )
        if account is None and email and profile.email_verified:
            account = await self.uow.accounts.get_by_email(email)

        if account is not None:
            account = await self._link(account, provider, profile, email, client)
            return Return.ok(account)

        if not email:
            return Return.err(
                Error("EMAIL_REQUIRED", "Email is required for registration")
            )

        # An unverified address must not take over an existing account
        if await self.uow.accounts.get_by_email(email) is not None:
            return Return.err(
                Error("DUPLICATE_EMAIL", "An account with this email already exists")
            )

        return await self._create(provider, profile, email, client)

    async def _link(
        self,
        account: Account,
        provider: str,
        profile: OAuthProfile,
        email: Optional[str],
        client: Optional[ClientInfo],
    ) -> Account:
        links = await self.uow.provider_links.get_by_account_id(account.id)
        already_linked = any(
            link.provider == provider and link.provider_id == profile.provider_id
            for link in links
        )
        if already_linked:
            return account

        try:
            await self.uow.provider_links.create(
                ProviderLink(
                    account_id=account.id,
                    provider=provider,
                    provider_id=profile.provider_id,
                    email=email,
                    avatar=profile.avatar,
                )
            )
        except DuplicateProviderLinkError:
            # A concurrent callback linked this identity first
            linked = await self.uow.accounts.get_by_provider_identity(
                provider, profile.provider_id
            )
            if linked is None:
                raise
            return linked

        await self.audit_logger.record(
            SecurityAction.oauth_link,
            account_id=account.id,
            client=client,
            metadata={"provider": provider},
        )
        return account

    async def _create(
        self,
        provider: str,
        profile: OAuthProfile,
        email: str,
        client: Optional[ClientInfo],
    ) -> Result[Account]:
        first_name = profile.first_name
        organization_name = f"{first_name}'s Organization"

        account = Account(
            public_id=await self.id_generator.generate(),
            email=email,
            first_name=first_name,
            last_name=profile.last_name,
            avatar=profile.avatar,
            is_verified=True,
            organization_name=organization_name,
            organization_slug=slugify(organization_name),
        )
        try:
            account = await self.uow.accounts.create(account)
        except DuplicateEmailError:
            return Return.err(
                Error("DUPLICATE_EMAIL", "An account with this email already exists")
            )

        await self.uow.provider_links.create(
            ProviderLink(
                account_id=account.id,
                provider=provider,
                provider_id=profile.provider_id,
                email=email,
                avatar=profile.avatar,
            )
        )
        await self.audit_logger.record(
            SecurityAction.register,
            account_id=account.id,
            client=client,
            metadata={"provider": provider, "method": "oauth"},
        )
        return Return.ok(account)
