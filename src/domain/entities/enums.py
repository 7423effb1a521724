"""
Portal Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class AccountRole(str, Enum):
    """Authorization tier of an account"""

    admin = "admin"
    manager = "manager"
    user = "user"
    viewer = "viewer"


class Industry(str, Enum):
    """Industry category of the account's organization"""

    fitness = "fitness"
    healthcare = "healthcare"
    retail = "retail"
    finance = "finance"
    manufacturing = "manufacturing"
    technology = "technology"
    professional_services = "professional_services"
    other = "other"


class SubscriptionPlan(str, Enum):
    """Plan tier, owned by the billing system"""

    starter = "starter"
    growth = "growth"
    scale = "scale"
    enterprise = "enterprise"
    trial = "trial"


class SubscriptionStatus(str, Enum):
    """Subscription status, owned by the billing system"""

    active = "active"
    inactive = "inactive"
    cancelled = "cancelled"
    past_due = "past_due"


class OAuthProviderName(str, Enum):
    """Supported external identity providers"""

    google = "google"
    github = "github"
    microsoft = "microsoft"
    linkedin = "linkedin"


class SecurityAction(str, Enum):
    """Closed vocabulary of security audit actions"""

    login_success = "login_success"
    login_failed = "login_failed"
    logout = "logout"
    register = "register"
    password_change = "password_change"
    password_reset_request = "password_reset_request"
    password_reset_complete = "password_reset_complete"
    email_verified = "email_verified"
    account_locked = "account_locked"
    account_unlocked = "account_unlocked"
    oauth_login = "oauth_login"
    oauth_link = "oauth_link"
    subscription_change = "subscription_change"
    profile_update = "profile_update"
    two_factor_enabled = "two_factor_enabled"
    two_factor_disabled = "two_factor_disabled"
    session_revoked = "session_revoked"
