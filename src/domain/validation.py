"""
Value validation for account fields.

Each validator returns a Result so use cases can propagate the failure
unchanged, independently of the storage layer.
"""

import re
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from libs.result import Error, Result, Return
from src.domain.entities import (
    AccountRole,
    Industry,
    SubscriptionPlan,
    SubscriptionStatus,
)

MIN_PASSWORD_LENGTH = 8
MAX_NAME_LENGTH = 50

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


def _invalid(message: str) -> Result:
    return Return.err(Error("VALIDATION_ERROR", message))


def normalize_email(email: Optional[str]) -> Result[str]:
    """Trim and lower-case an email; emails are unique case-insensitively."""
    if not email or not email.strip():
        return _invalid("Email is required")
    try:
        validated = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError:
        return _invalid("Please enter a valid email")
    return Return.ok(validated.normalized.lower())


def validate_password(password: Optional[str]) -> Result[str]:
    if not password:
        return _invalid("Password is required")
    if len(password) < MIN_PASSWORD_LENGTH:
        return _invalid(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return Return.ok(password)


def validate_name(value: Optional[str], field_name: str) -> Result[str]:
    if value is None or not value.strip():
        return _invalid(f"{field_name} is required")
    value = value.strip()
    if len(value) > MAX_NAME_LENGTH:
        return _invalid(f"{field_name} must be at most {MAX_NAME_LENGTH} characters")
    return Return.ok(value)


def validate_industry(value: Optional[str]) -> Result[Industry]:
    if not value:
        return Return.ok(Industry.other)
    try:
        return Return.ok(Industry(value))
    except ValueError:
        return _invalid(f"Unknown industry: {value}")


def validate_role(value: str) -> Result[AccountRole]:
    try:
        return Return.ok(AccountRole(value))
    except ValueError:
        return _invalid(f"Unknown role: {value}")


def validate_subscription_plan(value: str) -> Result[SubscriptionPlan]:
    try:
        return Return.ok(SubscriptionPlan(value))
    except ValueError:
        return _invalid(f"Unknown subscription plan: {value}")


def validate_subscription_status(value: str) -> Result[SubscriptionStatus]:
    try:
        return Return.ok(SubscriptionStatus(value))
    except ValueError:
        return _invalid(f"Unknown subscription status: {value}")


def slugify(name: str) -> str:
    """URL-safe organization slug: 'Acme Corp!' -> 'acme-corp'."""
    return _SLUG_SEPARATORS.sub("-", name.lower()).strip("-")
