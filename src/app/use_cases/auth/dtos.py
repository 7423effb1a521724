"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from typing import Optional

from src.app.use_cases.account_view import AccountView, CamelModel


# ============================================================================
# Command DTOs
# ============================================================================


class RegisterCommand(CamelModel):
    """
    Register command - represents validated registration intent

    Created by API layer after request validation passes.
    Contains only business-relevant data (no HTTP concerns).
    """

    email: str
    password: str
    first_name: str
    last_name: str
    organization_name: str
    phone: Optional[str] = None
    industry: Optional[str] = None


# ============================================================================
# Response DTOs
# ============================================================================


class AuthResponse(CamelModel):
    """Response for register, login and OAuth login"""

    account: AccountView
    access_token: str
    refresh_token: str


class TokenPairResponse(CamelModel):
    """Response for refresh token rotation"""

    access_token: str
    refresh_token: str


class MessageResponse(CamelModel):
    """Status/message response for flows that return no data"""

    status: str
    message: str
