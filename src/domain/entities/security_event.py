"""
SecurityEvent Entity

Immutable log of security-relevant events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from src.domain.base import utcnow
from .enums import SecurityAction


class SecurityEvent(SQLModel, table=True):
    """
    SecurityEvent entity - append-only audit record.

    Business Rules:
    - Immutable (never updated or deleted)
    - account_id nullable for anonymous failures
    - action is one of SecurityAction
    """

    __tablename__ = "security_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    account_id: Optional[UUID] = Field(default=None, index=True)

    action: SecurityAction
    ip: Optional[str] = Field(default=None, max_length=64)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_security_event_account_created", "account_id", "created_at"),
        Index("idx_security_event_action_created", "action", "created_at"),
    )
