from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from src.api.error import raise_for_error
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.account_view import CurrentAccount
from src.app.use_cases.audit import GetSecurityEventsUseCase, SecurityEventPage
from src.depends import get_current_account, get_unit_of_work

router = APIRouter(prefix="/portal", tags=["Portal"])


@router.get("/activity", status_code=status.HTTP_200_OK, response_model=SecurityEventPage)
async def get_activity(
    current: CurrentAccount = Depends(get_current_account),
    uow: UnitOfWork = Depends(get_unit_of_work),
    limit: int = Query(20, ge=1, le=100, description="Maximum number of events to return"),
    cursor: Optional[str] = Query(None, description="Pagination cursor"),
):
    """
    Activity Log

    The caller's own security events, newest first.
    """
    use_case = GetSecurityEventsUseCase(uow)
    result = await use_case.execute(account_id=current.id, limit=limit, cursor=cursor)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
