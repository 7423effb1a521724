from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import and_, case, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.account_repository import (
    DuplicateEmailError,
    FailedLoginState,
    IAccountRepository,
)
from src.domain.base import utcnow
from src.domain.entities import Account, ProviderLink


class AccountRepository(IAccountRepository):
    """Account repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _one_or_none(self, stmt) -> Optional[Account]:
        # Conditional UPDATEs bypass the identity map; reload loaded rows
        result = await self.session.exec(stmt.execution_options(populate_existing=True))
        return result.one_or_none()

    async def get_by_id(self, account_id: UUID) -> Optional[Account]:
        """Get account by ID"""
        stmt = select(Account).where(Account.id == account_id)
        return await self._one_or_none(stmt)

    async def get_by_public_id(self, public_id: str) -> Optional[Account]:
        """Get account by its human-readable public ID"""
        stmt = select(Account).where(Account.public_id == public_id)
        return await self._one_or_none(stmt)

    async def get_by_email(self, email: str) -> Optional[Account]:
        """Get account by email address (stored lower-cased)"""
        stmt = select(Account).where(Account.email == email.strip().lower())
        return await self._one_or_none(stmt)

    async def get_by_provider_identity(
        self, provider: str, provider_id: str
    ) -> Optional[Account]:
        """Get the account linked to (provider, provider_id)"""
        stmt = (
            select(Account)
            .join(ProviderLink, col(ProviderLink.account_id) == col(Account.id))
            .where(
                ProviderLink.provider == provider,
                ProviderLink.provider_id == provider_id,
            )
        )
        return await self._one_or_none(stmt)

    async def get_by_verification_token(self, token: str) -> Optional[Account]:
        """Get account by email verification token"""
        stmt = select(Account).where(Account.verification_token == token)
        return await self._one_or_none(stmt)

    async def get_by_reset_token_hash(self, token_hash: str) -> Optional[Account]:
        """Get account by password reset token hash"""
        stmt = select(Account).where(Account.reset_password_token_hash == token_hash)
        return await self._one_or_none(stmt)

    async def create(self, account: Account) -> Account:
        """
        Create a new account.

        The unique index on email is the arbiter between concurrent
        registrations: the loser's flush fails and surfaces as
        DuplicateEmailError.
        """
        self.session.add(account)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            if await self.get_by_email(account.email) is not None:
                raise DuplicateEmailError(account.email) from exc
            raise
        await self.session.refresh(account)
        return account

    async def update(self, account: Account) -> Account:
        """Update existing account"""
        account.updated_at = utcnow()
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def record_failed_login(
        self, account_id: UUID, now: datetime, max_attempts: int, lock_until: datetime
    ) -> FailedLoginState:
        """Count a failed login in one conditional UPDATE"""
        lock_elapsed = and_(
            col(Account.lock_until).is_not(None), col(Account.lock_until) <= now
        )
        attempts = case(
            (lock_elapsed, 1), else_=col(Account.failed_login_attempts) + 1
        )
        stmt = (
            update(Account)
            .where(
                col(Account.id) == account_id,
                or_(col(Account.lock_until).is_(None), col(Account.lock_until) <= now),
            )
            .values(
                failed_login_attempts=attempts,
                lock_until=case((attempts >= max_attempts, lock_until), else_=None),
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()

        row = (
            await self.session.execute(
                select(Account.failed_login_attempts, Account.lock_until).where(
                    Account.id == account_id
                )
            )
        ).one()
        return FailedLoginState(
            attempts=row[0], lock_until=row[1], applied=result.rowcount > 0
        )

    async def record_successful_login(self, account_id: UUID, now: datetime) -> None:
        """Reset lockout state and bump login tracking in one UPDATE"""
        stmt = (
            update(Account)
            .where(col(Account.id) == account_id)
            .values(
                failed_login_attempts=0,
                lock_until=None,
                last_login_at=now,
                login_count=col(Account.login_count) + 1,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        await self.session.flush()
