from abc import ABC, abstractmethod

from src.app.repositories.account_repository import IAccountRepository
from src.app.repositories.provider_link_repository import IProviderLinkRepository
from src.app.repositories.refresh_token_repository import IRefreshTokenRepository
from src.app.repositories.security_event_repository import ISecurityEventRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    accounts: IAccountRepository
    provider_links: IProviderLinkRepository
    refresh_tokens: IRefreshTokenRepository
    security_events: ISecurityEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
