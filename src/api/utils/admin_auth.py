"""
Admin API Key Authentication

Validates admin API keys for system administration endpoints.
"""

import secrets

from fastapi import Depends, Header, status
from libs.result import Error
from src.api.error import ClientError
from src.depends import get_settings


async def verify_admin_api_key(
    x_admin_api_key: str = Header(None),
    config=Depends(get_settings),
):
    """
    Verify admin API key from X-Admin-API-Key header.

    This is used for the billing system and other internal service
    integrations. Different from account JWT authentication - this is
    service-to-service auth.

    Raises:
        ClientError: 401 if key is missing or invalid

    Returns:
        True if valid
    """
    if not x_admin_api_key:
        raise ClientError(
            Error("UNAUTHENTICATED", "Admin API key required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    if not secrets.compare_digest(x_admin_api_key.encode(), config.ADMIN_API_KEY.encode()):
        raise ClientError(
            Error("INVALID_API_KEY", "Invalid admin API key"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return True
