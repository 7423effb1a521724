import anyio
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.account_repository import AccountRepository
from src.adapter.repositories.provider_link_repository import ProviderLinkRepository
from src.adapter.repositories.refresh_token_repository import RefreshTokenRepository
from src.adapter.repositories.security_event_repository import SecurityEventRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.accounts = AccountRepository(self.session)
        self.provider_links = ProviderLinkRepository(self.session)
        self.refresh_tokens = RefreshTokenRepository(self.session)
        self.security_events = SecurityEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        # A client disconnect must not cancel a commit halfway
        with anyio.CancelScope(shield=True):
            await self.session.commit()

    async def rollback(self):
        with anyio.CancelScope(shield=True):
            await self.session.rollback()
