from typing import List
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.provider_link_repository import (
    DuplicateProviderLinkError,
    IProviderLinkRepository,
)
from src.domain.entities import ProviderLink


class ProviderLinkRepository(IProviderLinkRepository):
    """ProviderLink repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_account_id(self, account_id: UUID) -> List[ProviderLink]:
        """Get all provider links of an account"""
        stmt = (
            select(ProviderLink)
            .where(ProviderLink.account_id == account_id)
            .order_by(col(ProviderLink.created_at))
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, link: ProviderLink) -> ProviderLink:
        """
        Attach a provider identity (unique per provider/provider_id).

        The insert runs in a savepoint so a lost race on the unique pair
        leaves the surrounding transaction usable.
        """
        try:
            async with self.session.begin_nested():
                self.session.add(link)
                await self.session.flush()
        except IntegrityError as exc:
            raise DuplicateProviderLinkError(link.provider, link.provider_id) from exc
        await self.session.refresh(link)
        return link
