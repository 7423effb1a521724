"""Admin use cases for billing and support integrations."""

from .change_subscription_use_case import (
    ChangeSubscriptionCommand,
    ChangeSubscriptionResponse,
    ChangeSubscriptionUseCase,
)
from .set_account_active_use_case import SetAccountActiveResponse, SetAccountActiveUseCase

__all__ = [
    "ChangeSubscriptionUseCase",
    "ChangeSubscriptionCommand",
    "ChangeSubscriptionResponse",
    "SetAccountActiveUseCase",
    "SetAccountActiveResponse",
]
