"""
Audit API Routes

Handles security event retrieval for administrators.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from src.api.error import raise_for_error
from src.api.utils.guards import require_role
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.account_view import CurrentAccount
from src.app.use_cases.audit import GetSecurityEventsUseCase, SecurityEventPage
from src.depends import get_unit_of_work
from src.domain.entities import AccountRole

router = APIRouter(prefix="/audit", tags=["Audit"])


@router.get(
    "/security-events",
    status_code=status.HTTP_200_OK,
    response_model=SecurityEventPage,
)
async def get_security_events(
    current: CurrentAccount = Depends(require_role(AccountRole.admin)),
    uow: UnitOfWork = Depends(get_unit_of_work),
    limit: int = Query(50, ge=1, le=100, description="Maximum number of events to return"),
    cursor: Optional[str] = Query(None, description="Pagination cursor"),
):
    """
    Get Security Events

    Returns security events of every account. Admin role only.

    Query Parameters:
        - limit: Maximum number of events to return (1-100, default 50)
        - cursor: Pagination cursor for fetching next page

    Returns:
        - events: List of security events ordered by newest first
        - nextCursor: Cursor for next page (null if no more events)

    Raises:
        - 401 Unauthorized: Invalid or expired token
        - 403 Forbidden: FORBIDDEN (not an admin)
    """
    use_case = GetSecurityEventsUseCase(uow)
    result = await use_case.execute(account_id=None, limit=limit, cursor=cursor)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
