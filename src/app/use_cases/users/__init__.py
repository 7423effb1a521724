"""
User Management Use Cases

All account self-service business logic.
"""

from .load_context_use_case import LoadContextUseCase
from .update_profile_use_case import UpdateProfileUseCase
from .update_organization_use_case import UpdateOrganizationUseCase
from .change_password_use_case import ChangePasswordUseCase
from .revoke_sessions_use_case import RevokeSessionsUseCase
from .dtos import (
    UpdateProfileCommand,
    UpdateOrganizationCommand,
    AccountResponse,
    OrganizationResponse,
    PasswordChangedResponse,
    SessionsRevokedResponse,
)

__all__ = [
    "LoadContextUseCase",
    "UpdateProfileUseCase",
    "UpdateOrganizationUseCase",
    "ChangePasswordUseCase",
    "RevokeSessionsUseCase",
    "UpdateProfileCommand",
    "UpdateOrganizationCommand",
    "AccountResponse",
    "OrganizationResponse",
    "PasswordChangedResponse",
    "SessionsRevokedResponse",
]
