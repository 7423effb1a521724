"""
Portal Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    AccountRole,
    Industry,
    OAuthProviderName,
    SecurityAction,
    SubscriptionPlan,
    SubscriptionStatus,
)

# Export all entities
from .account import Account
from .provider_link import ProviderLink
from .refresh_token import RefreshToken
from .security_event import SecurityEvent

__all__ = [
    # Enums
    "AccountRole",
    "Industry",
    "OAuthProviderName",
    "SecurityAction",
    "SubscriptionPlan",
    "SubscriptionStatus",
    # Entities
    "Account",
    "ProviderLink",
    "RefreshToken",
    "SecurityEvent",
]
