from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.domain.entities import ProviderLink


class DuplicateProviderLinkError(Exception):
    """Raised when (provider, provider_id) is already linked to an account"""


class IProviderLinkRepository(ABC):
    """ProviderLink repository interface - application layer"""

    @abstractmethod
    async def get_by_account_id(self, account_id: UUID) -> List[ProviderLink]:
        """Get all provider links of an account"""
        pass

    @abstractmethod
    async def create(self, link: ProviderLink) -> ProviderLink:
        """
        Attach a provider identity to an account.

        Raises:
            DuplicateProviderLinkError: the identity is already linked
        """
        pass
