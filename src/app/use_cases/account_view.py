"""
Public account projection shared by auth and user use cases.

Never includes the password hash, refresh tokens, or reset/verification
tokens.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.domain.entities import Account, ProviderLink


class CamelModel(BaseModel):
    """JSON payloads use camelCase; snake_case is accepted on input too"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrganizationView(CamelModel):
    name: str
    slug: str
    industry: str
    logo: Optional[str] = None


class SubscriptionView(CamelModel):
    plan: str
    status: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class AccountView(CamelModel):
    id: str
    email: str
    first_name: str
    last_name: str
    full_name: str
    phone: Optional[str] = None
    avatar: Optional[str] = None
    organization: OrganizationView
    role: str
    subscription: SubscriptionView
    is_verified: bool
    providers: List[str]
    created_at: datetime


class CurrentAccount(BaseModel):
    """
    Account resolved by the session guard for the current request.

    An immutable snapshot passed explicitly to handlers and authorization
    checks; role and plan come from storage, not from the token.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    public_id: str
    email: str
    role: str
    subscription_plan: str
    subscription_status: str
    is_verified: bool

    @classmethod
    def from_account(cls, account: Account) -> "CurrentAccount":
        return cls(
            id=account.id,
            public_id=account.public_id,
            email=account.email,
            role=_value(account.role),
            subscription_plan=_value(account.subscription_plan),
            subscription_status=_value(account.subscription_status),
            is_verified=account.is_verified,
        )


def _value(field) -> str:
    return getattr(field, "value", field)


def build_organization_view(account: Account) -> OrganizationView:
    return OrganizationView(
        name=account.organization_name,
        slug=account.organization_slug,
        industry=_value(account.organization_industry),
        logo=account.organization_logo,
    )


def build_subscription_view(account: Account) -> SubscriptionView:
    return SubscriptionView(
        plan=_value(account.subscription_plan),
        status=_value(account.subscription_status),
        start_date=account.subscription_start,
        end_date=account.subscription_end,
    )


def build_account_view(account: Account, links: List[ProviderLink]) -> AccountView:
    return AccountView(
        id=account.public_id,
        email=account.email,
        first_name=account.first_name,
        last_name=account.last_name,
        full_name=account.full_name,
        phone=account.phone,
        avatar=account.avatar,
        organization=build_organization_view(account),
        role=_value(account.role),
        subscription=build_subscription_view(account),
        is_verified=account.is_verified,
        providers=sorted({link.provider for link in links}),
        created_at=account.created_at,
    )
