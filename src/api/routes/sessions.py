from fastapi import APIRouter, Depends, status

from src.api.error import raise_for_error
from src.app.services.audit_logger import AuditLogger, ClientInfo
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.account_view import CurrentAccount
from src.app.use_cases.users import RevokeSessionsUseCase, SessionsRevokedResponse
from src.depends import (
    get_audit_logger,
    get_client_info,
    get_current_account,
    get_token_issuer,
    get_unit_of_work,
)

router = APIRouter(prefix="/sessions", tags=["Sessions"])


@router.post(
    "/revoke-all",
    status_code=status.HTTP_200_OK,
    response_model=SessionsRevokedResponse,
)
async def revoke_all_sessions(
    current: CurrentAccount = Depends(get_current_account),
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    audit_logger: AuditLogger = Depends(get_audit_logger),
    client: ClientInfo = Depends(get_client_info),
):
    """
    Revoke All Sessions

    Drops every refresh token of the caller. Useful after a suspected
    compromise; access tokens already issued expire on their own.
    """
    use_case = RevokeSessionsUseCase(uow, token_issuer, audit_logger)
    result = await use_case.execute(current.id, client)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
