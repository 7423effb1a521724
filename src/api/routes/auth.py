from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import RedirectResponse
from pydantic import EmailStr, Field

from src.api.error import raise_for_error
from src.api.utils.cookies import REFRESH_COOKIE, clear_auth_cookies, set_auth_cookies
from src.app.services.audit_logger import AuditLogger, ClientInfo
from src.app.services.email_sender import IEmailSender
from src.app.services.lockout_policy import LockoutPolicy
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.account_view import CamelModel, CurrentAccount
from src.app.use_cases.auth import (
    AuthResponse,
    ConfirmPasswordResetUseCase,
    LoginUseCase,
    LogoutUseCase,
    MessageResponse,
    RefreshTokenUseCase,
    RegisterCommand,
    RegisterUseCase,
    RequestPasswordResetUseCase,
    TokenPairResponse,
    VerifyEmailUseCase,
)
from src.app.use_cases.users import AccountResponse, LoadContextUseCase
from src.depends import (
    get_audit_logger,
    get_client_info,
    get_current_account,
    get_email_sender,
    get_lockout_policy,
    get_password_hasher,
    get_settings,
    get_token_issuer,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


class RegisterRequest(CamelModel):
    """
    Register HTTP request payload

    Validates incoming HTTP request before converting to RegisterCommand.
    API layer responsibility: HTTP validation and serialization.
    """

    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(..., min_length=8, description="Password (min 8 chars)")
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    organization_name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=32)
    industry: Optional[str] = None


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
async def register(
    request: RegisterRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    audit_logger: AuditLogger = Depends(get_audit_logger),
    email_sender: IEmailSender = Depends(get_email_sender),
    client: ClientInfo = Depends(get_client_info),
    config=Depends(get_settings),
):
    """
    Account Registration

    Command/Response Flow:
    1. RegisterRequest validates HTTP input
    2. Map to RegisterCommand (business intent)
    3. Execute RegisterUseCase
    4. Set auth cookies and return AuthResponse

    Raises:
        - 400 Bad Request: VALIDATION_ERROR, DUPLICATE_EMAIL
    """
    command = RegisterCommand(**request.model_dump())

    use_case = RegisterUseCase(
        uow,
        password_hasher,
        token_issuer,
        audit_logger,
        email_sender,
        account_id_prefix=config.ACCOUNT_ID_PREFIX,
        verification_lifetime=timedelta(hours=config.VERIFICATION_TOKEN_HOURS),
    )
    result = await use_case.execute(command, client)

    if result.is_err():
        raise_for_error(result.error)

    set_auth_cookies(response, result.value.access_token, result.value.refresh_token, config)
    return result.value


class LoginRequest(CamelModel):
    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(..., min_length=1, description="Password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=AuthResponse)
async def login(
    request: LoginRequest,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    audit_logger: AuditLogger = Depends(get_audit_logger),
    lockout_policy: LockoutPolicy = Depends(get_lockout_policy),
    client: ClientInfo = Depends(get_client_info),
    config=Depends(get_settings),
):
    """
    Password Login

    Raises:
        - 401 Unauthorized: INVALID_CREDENTIALS, ACCOUNT_DEACTIVATED
        - 423 Locked: ACCOUNT_LOCKED
    """
    use_case = LoginUseCase(uow, password_hasher, token_issuer, audit_logger, lockout_policy)
    result = await use_case.execute(request.email, request.password, client)

    if result.is_err():
        raise_for_error(result.error)

    set_auth_cookies(response, result.value.access_token, result.value.refresh_token, config)
    return result.value


class RefreshRequest(CamelModel):
    refresh_token: Optional[str] = Field(None, description="Refresh token")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=TokenPairResponse)
async def refresh(
    http_request: Request,
    response: Response,
    request: Optional[RefreshRequest] = None,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    config=Depends(get_settings),
):
    """
    Refresh Token Rotation

    The token is taken from the body, else from the refreshToken cookie.

    Raises:
        - 401 Unauthorized: REFRESH_INVALID
    """
    refresh_token = (request.refresh_token if request else None) or http_request.cookies.get(
        REFRESH_COOKIE
    )

    use_case = RefreshTokenUseCase(uow, token_issuer)
    result = await use_case.execute(refresh_token)

    if result.is_err():
        raise_for_error(result.error)

    set_auth_cookies(response, result.value.access_token, result.value.refresh_token, config)
    return result.value


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def logout(
    http_request: Request,
    response: Response,
    request: Optional[RefreshRequest] = None,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    audit_logger: AuditLogger = Depends(get_audit_logger),
    client: ClientInfo = Depends(get_client_info),
    config=Depends(get_settings),
):
    """
    Logout

    Always succeeds. Revokes the presented refresh token and clears cookies.
    """
    refresh_token = (request.refresh_token if request else None) or http_request.cookies.get(
        REFRESH_COOKIE
    )

    use_case = LogoutUseCase(uow, token_issuer, audit_logger)
    result = await use_case.execute(refresh_token, client)

    clear_auth_cookies(response, config)
    return result.value


@router.get("/me", status_code=status.HTTP_200_OK, response_model=AccountResponse)
async def me(
    current: CurrentAccount = Depends(get_current_account),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Current Account

    Raises:
        - 401 Unauthorized: UNAUTHENTICATED, TOKEN_EXPIRED, INVALID_TOKEN,
          ACCOUNT_DEACTIVATED
    """
    use_case = LoadContextUseCase(uow)
    result = await use_case.execute(current.id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/verify-email")
async def verify_email(
    token: Optional[str] = Query(None),
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit_logger: AuditLogger = Depends(get_audit_logger),
    client: ClientInfo = Depends(get_client_info),
    config=Depends(get_settings),
):
    """
    Email Verification

    Redirects to the portal on success.

    Raises:
        - 400 Bad Request: INVALID_TOKEN
    """
    use_case = VerifyEmailUseCase(uow, audit_logger)
    result = await use_case.execute(token, client)

    if result.is_err():
        raise_for_error(result.error)

    return RedirectResponse(url=f"{config.PORTAL_URL}?verified=true")


class ForgotPasswordRequest(CamelModel):
    email: EmailStr = Field(..., description="Account email address")


@router.post("/forgot-password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def forgot_password(
    request: ForgotPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    audit_logger: AuditLogger = Depends(get_audit_logger),
    email_sender: IEmailSender = Depends(get_email_sender),
    client: ClientInfo = Depends(get_client_info),
    config=Depends(get_settings),
):
    """
    Request Password Reset

    Same response whether or not the account exists.
    """
    use_case = RequestPasswordResetUseCase(
        uow,
        audit_logger,
        email_sender,
        reset_lifetime=timedelta(hours=config.PASSWORD_RESET_HOURS),
    )
    result = await use_case.execute(request.email, client)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ResetPasswordRequest(CamelModel):
    token: Optional[str] = None
    new_password: Optional[str] = None


@router.post("/reset-password", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    audit_logger: AuditLogger = Depends(get_audit_logger),
    client: ClientInfo = Depends(get_client_info),
):
    """
    Confirm Password Reset

    Revokes every refresh token of the account.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR, INVALID_TOKEN
    """
    use_case = ConfirmPasswordResetUseCase(uow, password_hasher, token_issuer, audit_logger)
    result = await use_case.execute(request.token, request.new_password, client)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
