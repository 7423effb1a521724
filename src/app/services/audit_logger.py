"""
Audit Logger

Best-effort append of security events. A failed write is logged locally and
never becomes the error of the operation being audited.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import SecurityAction, SecurityEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientInfo:
    """Where a request came from, recorded on every security event"""

    ip: Optional[str] = None
    user_agent: Optional[str] = None


class AuditLogger:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def record(
        self,
        action: SecurityAction,
        account_id: Optional[UUID] = None,
        client: Optional[ClientInfo] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        client = client or ClientInfo()
        event = SecurityEvent(
            account_id=account_id,
            action=action,
            ip=client.ip,
            user_agent=client.user_agent,
            event_metadata=metadata,
        )
        try:
            await self.uow.security_events.create(event)
        except SQLAlchemyError:
            logger.exception("Failed to record security event %s", action.value)
