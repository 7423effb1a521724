"""
Audit Use Cases

All audit-related business logic.
"""

from .get_security_events_use_case import (
    GetSecurityEventsUseCase,
    SecurityEventPage,
    SecurityEventView,
)

__all__ = [
    "GetSecurityEventsUseCase",
    "SecurityEventPage",
    "SecurityEventView",
]
