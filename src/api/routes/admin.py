"""
Admin API Routes - System Administration Endpoints

These endpoints are for internal service integrations (e.g., billing system).
Authentication is via Admin API Key, not account JWTs.
"""

from fastapi import APIRouter, Depends, status

from src.api.error import raise_for_error
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.services.audit_logger import AuditLogger
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.admin import (
    ChangeSubscriptionCommand,
    ChangeSubscriptionResponse,
    ChangeSubscriptionUseCase,
    SetAccountActiveResponse,
    SetAccountActiveUseCase,
)
from src.depends import get_audit_logger, get_token_issuer, get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.put(
    "/accounts/{public_id}/subscription",
    status_code=status.HTTP_200_OK,
    response_model=ChangeSubscriptionResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def change_subscription(
    public_id: str,
    request: ChangeSubscriptionCommand,
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    """
    Change Subscription

    Billing system endpoint to record a plan or status change.

    Requires: X-Admin-API-Key header

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 401 Unauthorized: Missing or invalid admin API key
        - 404 Not Found: ACCOUNT_NOT_FOUND
    """
    use_case = ChangeSubscriptionUseCase(uow, audit_logger)
    result = await use_case.execute(public_id, request)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/accounts/{public_id}/deactivate",
    status_code=status.HTTP_200_OK,
    response_model=SetAccountActiveResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def deactivate_account(
    public_id: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    """
    Deactivate Account

    Blocks sign-in and revokes every refresh token.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 404 Not Found: ACCOUNT_NOT_FOUND
    """
    use_case = SetAccountActiveUseCase(uow, token_issuer, audit_logger)
    result = await use_case.execute(public_id, active=False)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/accounts/{public_id}/reactivate",
    status_code=status.HTTP_200_OK,
    response_model=SetAccountActiveResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def reactivate_account(
    public_id: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    """
    Reactivate Account

    Requires: X-Admin-API-Key header
    """
    use_case = SetAccountActiveUseCase(uow, token_issuer, audit_logger)
    result = await use_case.execute(public_id, active=True)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
