from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from uuid import UUID

from src.domain.entities import SecurityEvent


class ISecurityEventRepository(ABC):
    """SecurityEvent repository interface - application layer"""

    @abstractmethod
    async def create(self, event: SecurityEvent) -> SecurityEvent:
        """Append a security event (immutable)"""
        pass

    @abstractmethod
    async def get_paginated(
        self,
        account_id: Optional[UUID] = None,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Tuple[List[SecurityEvent], Optional[str]]:
        """
        Get security events with cursor-based pagination.

        Args:
            account_id: Restrict to one account, or None for all accounts

        Returns:
            Tuple of (events list, next_cursor)
            - events: ordered by created_at DESC
            - next_cursor: Cursor for next page, None if no more events
        """
        pass
