from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import Field

from src.api.error import raise_for_error
from src.api.utils.cookies import set_auth_cookies
from src.api.utils.guards import require_role
from src.app.services.audit_logger import AuditLogger, ClientInfo
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.account_view import CamelModel, CurrentAccount
from src.app.use_cases.users import (
    AccountResponse,
    ChangePasswordUseCase,
    OrganizationResponse,
    PasswordChangedResponse,
    UpdateOrganizationCommand,
    UpdateOrganizationUseCase,
    UpdateProfileCommand,
    UpdateProfileUseCase,
)
from src.depends import (
    get_audit_logger,
    get_client_info,
    get_current_account,
    get_password_hasher,
    get_settings,
    get_token_issuer,
    get_unit_of_work,
)
from src.domain.entities import AccountRole

router = APIRouter(prefix="/users", tags=["User"])


class UpdateProfileRequest(CamelModel):
    """Only the fields present are changed"""

    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    phone: Optional[str] = Field(None, max_length=32)
    avatar: Optional[str] = Field(None, max_length=512)


@router.put("/profile", status_code=status.HTTP_200_OK, response_model=AccountResponse)
async def update_profile(
    request: UpdateProfileRequest,
    current: CurrentAccount = Depends(get_current_account),
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit_logger: AuditLogger = Depends(get_audit_logger),
    client: ClientInfo = Depends(get_client_info),
):
    """
    Update Profile

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 401 Unauthorized: not signed in
    """
    use_case = UpdateProfileUseCase(uow, audit_logger)
    result = await use_case.execute(
        current.id, UpdateProfileCommand(**request.model_dump()), client
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class UpdateOrganizationRequest(CamelModel):
    name: Optional[str] = Field(None, max_length=255)
    industry: Optional[str] = None
    logo: Optional[str] = Field(None, max_length=512)


@router.put(
    "/organization", status_code=status.HTTP_200_OK, response_model=OrganizationResponse
)
async def update_organization(
    request: UpdateOrganizationRequest,
    current: CurrentAccount = Depends(require_role(AccountRole.admin, AccountRole.manager)),
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit_logger: AuditLogger = Depends(get_audit_logger),
    client: ClientInfo = Depends(get_client_info),
):
    """
    Update Organization

    Changing the name regenerates the slug.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 401 Unauthorized: not signed in
        - 403 Forbidden: caller is not an admin or manager
    """
    use_case = UpdateOrganizationUseCase(uow, audit_logger)
    result = await use_case.execute(
        current.id, UpdateOrganizationCommand(**request.model_dump()), client
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., description="New password (min 8 chars)")


@router.put("/password", status_code=status.HTTP_200_OK, response_model=PasswordChangedResponse)
async def change_password(
    request: ChangePasswordRequest,
    response: Response,
    current: CurrentAccount = Depends(get_current_account),
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    audit_logger: AuditLogger = Depends(get_audit_logger),
    client: ClientInfo = Depends(get_client_info),
    config=Depends(get_settings),
):
    """
    Change Password

    Signs out every other session and returns a fresh token pair.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR
        - 401 Unauthorized: INVALID_CREDENTIALS (current password wrong)
    """
    use_case = ChangePasswordUseCase(uow, password_hasher, token_issuer, audit_logger)
    result = await use_case.execute(
        current.id, request.current_password, request.new_password, client
    )

    if result.is_err():
        raise_for_error(result.error)

    set_auth_cookies(response, result.value.access_token, result.value.refresh_token, config)
    return result.value
