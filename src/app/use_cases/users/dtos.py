"""
User Use Case DTOs
"""

from typing import Optional

from src.app.use_cases.account_view import AccountView, CamelModel, OrganizationView


class UpdateProfileCommand(CamelModel):
    """Fields left as None are not changed"""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None


class AccountResponse(CamelModel):
    account: AccountView


class PasswordChangedResponse(CamelModel):
    """New token pair; every other session has been signed out"""

    message: str
    access_token: str
    refresh_token: str


class SessionsRevokedResponse(CamelModel):
    revoked_count: int


class UpdateOrganizationCommand(CamelModel):
    """Fields left as None are not changed"""

    name: Optional[str] = None
    industry: Optional[str] = None
    logo: Optional[str] = None


class OrganizationResponse(CamelModel):
    organization: OrganizationView
