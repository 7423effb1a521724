"""
Use Cases

Organized into domain folders:
- auth/: Authentication flows
- users/: Account self-service
- audit/: Security event log
- admin/: Billing and support integrations

Import from subdirectories for better organization.
"""

from .auth import (
    RegisterUseCase,
    RegisterCommand,
    LoginUseCase,
    RefreshTokenUseCase,
    LogoutUseCase,
    VerifyEmailUseCase,
    RequestPasswordResetUseCase,
    ConfirmPasswordResetUseCase,
    OAuthLoginUseCase,
)
from .users import (
    LoadContextUseCase,
    UpdateProfileUseCase,
    ChangePasswordUseCase,
    RevokeSessionsUseCase,
)
from .audit import GetSecurityEventsUseCase
from .admin import ChangeSubscriptionUseCase, SetAccountActiveUseCase

__all__ = [
    # Auth
    "RegisterUseCase",
    "RegisterCommand",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "VerifyEmailUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    "OAuthLoginUseCase",
    # Users
    "LoadContextUseCase",
    "UpdateProfileUseCase",
    "ChangePasswordUseCase",
    "RevokeSessionsUseCase",
    # Audit
    "GetSecurityEventsUseCase",
    # Admin
    "ChangeSubscriptionUseCase",
    "SetAccountActiveUseCase",
]
