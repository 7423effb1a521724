import logging
import secrets
from datetime import timedelta
from typing import Optional

from libs.result import Error, Result, Return
from src.app.repositories.account_repository import DuplicateEmailError
from src.app.services.account_id_generator import AccountIdGenerator
from src.app.services.audit_logger import AuditLogger, ClientInfo
from src.app.services.email_sender import IEmailSender
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.account_view import build_account_view
from src.domain.base import utcnow
from src.domain.entities import Account, Industry, SecurityAction
from src.domain.validation import (
    normalize_email,
    slugify,
    validate_industry,
    validate_name,
    validate_password,
)
from .dtos import AuthResponse, RegisterCommand

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Register Use Case

    Command/Response Pattern:
    - Input: RegisterCommand (validated business intent)
    - Output: Result[AuthResponse] (account projection and tokens)

    Business Logic:
    1. Validate fields (email, password length, names, organization, industry)
    2. Check if email already exists (case-insensitive)
    3. Hash password with bcrypt
    4. Create Account with a fresh public ID and a single-use verification token
    5. Issue access and refresh tokens
    6. Record a register security event (method=email)
    7. Commit, then hand welcome and verification emails to the email sender
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_hasher: IPasswordHasher,
        token_issuer: TokenIssuer,
        audit_logger: AuditLogger,
        email_sender: IEmailSender,
        account_id_prefix: str = "AIGNC",
        verification_lifetime: timedelta = timedelta(hours=24),
    ):
        self.uow = uow
        self.password_hasher = password_hasher
        self.token_issuer = token_issuer
        self.audit_logger = audit_logger
        self.email_sender = email_sender
        self.account_id_prefix = account_id_prefix
        self.verification_lifetime = verification_lifetime

    def _validate(self, command: RegisterCommand) -> Result[RegisterCommand]:
        checks = [
            normalize_email(command.email),
            validate_password(command.password),
            validate_name(command.first_name, "First name"),
            validate_name(command.last_name, "Last name"),
            validate_industry(command.industry),
        ]
        for check in checks:
            if check.is_err():
                return check
        if not command.organization_name or not command.organization_name.strip():
            return Return.err(Error("VALIDATION_ERROR", "Organization name is required"))

        return Return.ok(
            command.model_copy(
                update={
                    "email": checks[0].value,
                    "first_name": checks[2].value,
                    "last_name": checks[3].value,
                    "industry": checks[4].value.value,
                    "organization_name": command.organization_name.strip(),
                }
            )
        )

    async def execute(
        self, command: RegisterCommand, client: Optional[ClientInfo] = None
    ) -> Result[AuthResponse]:
        """
        Execute register use case

        Returns:
            Result[AuthResponse] or Error VALIDATION_ERROR / DUPLICATE_EMAIL
        """
        validation = self._validate(command)
        if validation.is_err():
            return Return.err(validation.error)
        command = validation.value

        duplicate = Error("DUPLICATE_EMAIL", "An account with this email already exists")

        async with self.uow:
            if await self.uow.accounts.get_by_email(command.email):
                return Return.err(duplicate)

            password_hash = await self.password_hasher.hash(command.password)
            public_id = await AccountIdGenerator(
                self.uow.accounts, self.account_id_prefix
            ).generate()
            verification_token = secrets.token_urlsafe(32)

            account = Account(
                public_id=public_id,
                email=command.email,
                password_hash=password_hash,
                first_name=command.first_name,
                last_name=command.last_name,
                phone=command.phone,
                organization_name=command.organization_name,
                organization_slug=slugify(command.organization_name),
                organization_industry=Industry(command.industry),
                is_verified=False,
                verification_token=verification_token,
                verification_expires_at=utcnow() + self.verification_lifetime,
            )
            try:
                account = await self.uow.accounts.create(account)
            except DuplicateEmailError:
                return Return.err(duplicate)

            tokens = await self.token_issuer.issue(account)

            await self.audit_logger.record(
                SecurityAction.register,
                account_id=account.id,
                client=client,
                metadata={"method": "email"},
            )

            response = AuthResponse(
                account=build_account_view(account, []),
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
            )

            await self.uow.commit()

            await self._send_emails(account, verification_token)

            return Return.ok(response)

    async def _send_emails(self, account: Account, verification_token: str) -> None:
        try:
            await self.email_sender.send_welcome_email(account)
            await self.email_sender.send_verification_email(account, verification_token)
        except Exception:
            logger.exception("Failed to dispatch registration emails for %s", account.public_id)
