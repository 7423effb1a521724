"""
Get Security Events Use Case

Retrieves security events with cursor pagination, either for one account
(the portal activity feed) or across all accounts (administrators).
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.account_view import CamelModel

MAX_PAGE_SIZE = 100


class SecurityEventView(CamelModel):
    id: UUID
    account_id: Optional[UUID] = None
    action: str
    ip: Optional[str] = None
    user_agent: Optional[str] = None
    metadata: Dict[str, Any]
    created_at: datetime


class SecurityEventPage(CamelModel):
    events: List[SecurityEventView]
    next_cursor: Optional[str] = None


class GetSecurityEventsUseCase:
    """
    Use case for reading the security event log.

    Business Rules:
    - Results ordered by newest first
    - Supports cursor-based pagination; page size capped at 100
    - account_id=None reads every account's events; authorization is the
      caller's responsibility
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        account_id: Optional[UUID] = None,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Result[SecurityEventPage]:
        """
        Execute get security events use case.

        Args:
            account_id: Restrict to one account, or None for all
            limit: Maximum number of events to return
            cursor: Pagination cursor (optional)

        Returns:
            Result with events list and next_cursor
        """
        limit = max(1, min(limit, MAX_PAGE_SIZE))

        async with self.uow:
            events, next_cursor = await self.uow.security_events.get_paginated(
                account_id=account_id, limit=limit, cursor=cursor
            )

            return Return.ok(
                SecurityEventPage(
                    events=[
                        SecurityEventView(
                            id=event.id,
                            account_id=event.account_id,
                            action=getattr(event.action, "value", event.action),
                            ip=event.ip,
                            user_agent=event.user_agent,
                            metadata=event.event_metadata or {},
                            created_at=event.created_at,
                        )
                        for event in events
                    ],
                    next_cursor=next_cursor,
                )
            )
