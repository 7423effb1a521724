from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import RefreshToken


class IRefreshTokenRepository(ABC):
    """RefreshToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: RefreshToken) -> RefreshToken:
        """Store a new refresh token"""
        pass

    @abstractmethod
    async def get_by_account_id(self, account_id: UUID) -> List[RefreshToken]:
        """Get the account's refresh tokens, oldest first"""
        pass

    @abstractmethod
    async def find_active_by_hash(
        self, token_hash: str, now: datetime
    ) -> Optional[RefreshToken]:
        """Find a non-expired refresh token by its hash"""
        pass

    @abstractmethod
    async def claim(self, token_hash: str, now: datetime) -> bool:
        """
        Delete a non-expired token by hash.

        Returns True only for the caller whose DELETE removed the row, so two
        racing rotations of the same token cannot both succeed.
        """
        pass

    @abstractmethod
    async def delete_by_hash(self, token_hash: str, account_id: Optional[UUID] = None) -> bool:
        """Delete a single token. Returns True if a token was removed."""
        pass

    @abstractmethod
    async def delete_expired(self, account_id: UUID, now: datetime) -> int:
        """Delete the account's expired tokens. Returns count removed."""
        pass

    @abstractmethod
    async def delete_oldest_beyond(self, account_id: UUID, keep: int) -> int:
        """Keep only the newest `keep` tokens. Returns count removed."""
        pass

    @abstractmethod
    async def delete_all_by_account_id(self, account_id: UUID) -> int:
        """Delete every token of the account. Returns count removed."""
        pass
