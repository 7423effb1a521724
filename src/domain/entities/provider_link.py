"""
ProviderLink Entity

Links an external identity provider account to a local account.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel, UniqueConstraint

from src.domain.base import utcnow


class ProviderLink(SQLModel, table=True):
    """
    ProviderLink entity - (provider, provider_id) attached to an account.

    Business Rules:
    - A (provider, provider_id) pair maps to at most one account
    - An account may link several providers
    """

    __tablename__ = "provider_links"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    account_id: UUID = Field(foreign_key="accounts.id", nullable=False, index=True)

    provider: str = Field(max_length=32)
    provider_id: str = Field(max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    avatar: Optional[str] = Field(default=None, max_length=512)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint("provider", "provider_id", name="uq_provider_identity"),
    )
