"""
RefreshToken Entity

The account's bounded list of outstanding refresh tokens.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class RefreshToken(SQLModel, table=True):
    """
    RefreshToken entity - one outstanding refresh token of an account.

    Business Rules:
    - Only the SHA-256 hash of the opaque token is stored
    - Single use: rotation deletes the presented token
    - At most MAX_REFRESH_TOKENS per account, oldest evicted first
    - Expires after 30 days
    """

    __tablename__ = "refresh_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    account_id: UUID = Field(foreign_key="accounts.id", nullable=False, index=True)

    token_hash: str = Field(unique=True, index=True, max_length=64)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))

    __table_args__ = (Index("idx_refresh_token_expires_at", "expires_at"),)
