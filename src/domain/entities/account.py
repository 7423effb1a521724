"""
Account Entity

The identity and organization record of the client portal.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import AccountRole, Industry, SubscriptionPlan, SubscriptionStatus


class Account(SQLModel, table=True):
    """
    Account entity - one client identity with its embedded organization.

    Business Rules:
    - Email is unique across all accounts and stored lower-cased
    - password_hash is empty for OAuth-only accounts; such accounts always
      carry at least one provider link
    - lock_until in the past is equivalent to "not locked"
    - Subscription fields are written by the billing integration only
    - Never hard-deleted; deactivation clears is_active
    """

    __tablename__ = "accounts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    public_id: str = Field(unique=True, index=True, max_length=32)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: Optional[str] = Field(default=None, max_length=60)

    # Profile
    first_name: str = Field(max_length=50)
    last_name: str = Field(default="", max_length=50)
    phone: Optional[str] = Field(default=None, max_length=32)
    avatar: Optional[str] = Field(default=None, max_length=512)

    # Organization (owned 1:1, embedded)
    organization_name: str = Field(max_length=255)
    organization_slug: str = Field(default="", index=True, max_length=255)
    organization_industry: Industry = Field(default=Industry.other)
    organization_logo: Optional[str] = Field(default=None, max_length=512)

    role: AccountRole = Field(default=AccountRole.user)

    # Subscription
    subscription_plan: SubscriptionPlan = Field(default=SubscriptionPlan.trial)
    subscription_status: SubscriptionStatus = Field(default=SubscriptionStatus.active)
    subscription_start: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    subscription_end: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Security state
    is_active: bool = Field(default=True)
    is_verified: bool = Field(default=False)
    verification_token: Optional[str] = Field(
        default=None, unique=True, index=True, max_length=64
    )
    verification_expires_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    reset_password_token_hash: Optional[str] = Field(default=None, index=True, max_length=64)
    reset_password_expires: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    failed_login_attempts: int = Field(default=0)
    lock_until: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Tracking
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    login_count: int = Field(default=0)
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_account_org_name", "organization_name"),)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def is_locked(self, now: datetime) -> bool:
        return self.lock_until is not None and self.lock_until > now
