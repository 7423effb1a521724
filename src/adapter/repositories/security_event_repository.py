import base64
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.security_event_repository import ISecurityEventRepository
from src.domain.entities import SecurityEvent


class SecurityEventRepository(ISecurityEventRepository):
    """SecurityEvent repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, event: SecurityEvent) -> SecurityEvent:
        """
        Append a security event (immutable).

        The insert runs in a savepoint: a failed write is rolled back on its
        own and leaves the surrounding transaction usable.
        """
        async with self.session.begin_nested():
            self.session.add(event)
            await self.session.flush()
        return event

    async def get_paginated(
        self,
        account_id: Optional[UUID] = None,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Tuple[List[SecurityEvent], Optional[str]]:
        """
        Get security events with cursor-based pagination.

        Cursor format: base64-encoded ISO timestamp of created_at
        """
        stmt = select(SecurityEvent)
        if account_id is not None:
            stmt = stmt.where(SecurityEvent.account_id == account_id)

        if cursor:
            try:
                cursor_timestamp_str = base64.b64decode(cursor).decode("utf-8")
                cursor_timestamp = datetime.fromisoformat(cursor_timestamp_str)
                stmt = stmt.where(col(SecurityEvent.created_at) < cursor_timestamp)
            except (ValueError, TypeError):
                # Invalid cursor, ignore and return from beginning
                pass

        stmt = stmt.order_by(col(SecurityEvent.created_at).desc()).limit(limit + 1)

        result = await self.session.exec(stmt)
        events = list(result.all())

        has_more = len(events) > limit
        if has_more:
            events = events[:limit]

        next_cursor = None
        if has_more and events:
            cursor_timestamp_str = events[-1].created_at.isoformat()
            next_cursor = base64.b64encode(cursor_timestamp_str.encode("utf-8")).decode("utf-8")

        return events, next_cursor
