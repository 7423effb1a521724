from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.refresh_token_repository import IRefreshTokenRepository
from src.domain.entities import RefreshToken


class RefreshTokenRepository(IRefreshTokenRepository):
    """RefreshToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: RefreshToken) -> RefreshToken:
        """Store a new refresh token"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_by_account_id(self, account_id: UUID) -> List[RefreshToken]:
        """Get the account's refresh tokens, oldest first"""
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.account_id == account_id)
            .order_by(col(RefreshToken.created_at))
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def find_active_by_hash(
        self, token_hash: str, now: datetime
    ) -> Optional[RefreshToken]:
        """Find a non-expired refresh token by its hash"""
        stmt = select(RefreshToken).where(
            RefreshToken.token_hash == token_hash,
            col(RefreshToken.expires_at) > now,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def claim(self, token_hash: str, now: datetime) -> bool:
        """Delete a non-expired token; only one concurrent caller gets True"""
        stmt = (
            delete(RefreshToken)
            .where(
                col(RefreshToken.token_hash) == token_hash,
                col(RefreshToken.expires_at) > now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def delete_by_hash(self, token_hash: str, account_id: Optional[UUID] = None) -> bool:
        """Delete a single token"""
        stmt = delete(RefreshToken).where(col(RefreshToken.token_hash) == token_hash)
        if account_id is not None:
            stmt = stmt.where(col(RefreshToken.account_id) == account_id)
        result = await self.session.execute(
            stmt.execution_options(synchronize_session=False)
        )
        await self.session.flush()
        return result.rowcount > 0

    async def delete_expired(self, account_id: UUID, now: datetime) -> int:
        """Delete the account's expired tokens"""
        stmt = (
            delete(RefreshToken)
            .where(
                col(RefreshToken.account_id) == account_id,
                col(RefreshToken.expires_at) <= now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete_oldest_beyond(self, account_id: UUID, keep: int) -> int:
        """Keep only the newest `keep` tokens of the account"""
        stmt = (
            select(RefreshToken.id)
            .where(RefreshToken.account_id == account_id)
            .order_by(col(RefreshToken.created_at).desc())
            .offset(keep)
        )
        evicted = list((await self.session.exec(stmt)).all())
        if not evicted:
            return 0

        result = await self.session.execute(
            delete(RefreshToken)
            .where(col(RefreshToken.id).in_(evicted))
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
        return result.rowcount

    async def delete_all_by_account_id(self, account_id: UUID) -> int:
        """Delete every token of the account"""
        stmt = (
            delete(RefreshToken)
            .where(col(RefreshToken.account_id) == account_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
