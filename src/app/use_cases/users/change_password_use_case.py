"""
Change Password Use Case

Handles password change for an authenticated account.
"""

from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.audit_logger import AuditLogger, ClientInfo
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import SecurityAction
from src.domain.validation import validate_password
from .dtos import PasswordChangedResponse


class ChangePasswordUseCase:
    """
    Use case for changing the caller's password.

    Business Rules:
    - The current password must be confirmed; OAuth-only accounts have none
      and fail the same way
    - New password must be at least 8 characters
    - Every existing refresh token is revoked and a fresh pair is issued to
      the caller, so only the current device stays signed in
    - Records password_change and session_revoked
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_hasher: IPasswordHasher,
        token_issuer: TokenIssuer,
        audit_logger: AuditLogger,
    ):
        self.uow = uow
        self.password_hasher = password_hasher
        self.token_issuer = token_issuer
        self.audit_logger = audit_logger

    async def execute(
        self,
        account_id: UUID,
        current_password: Optional[str],
        new_password: Optional[str],
        client: Optional[ClientInfo] = None,
    ) -> Result[PasswordChangedResponse]:
        """
        Execute change password use case.

        Errors:
            - VALIDATION_ERROR: Missing or too short password
            - INVALID_CREDENTIALS: Current password is incorrect
            - ACCOUNT_NOT_FOUND: Account no longer exists
        """
        if not current_password:
            return Return.err(Error("VALIDATION_ERROR", "Current password is required"))
        password_validation = validate_password(new_password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        async with self.uow:
            account = await self.uow.accounts.get_by_id(account_id)
            if account is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            if not await self.password_hasher.verify(current_password, account.password_hash):
                await self.audit_logger.record(
                    SecurityAction.login_failed,
                    account_id=account.id,
                    client=client,
                    metadata={"reason": "password_change_rejected"},
                )
                await self.uow.commit()
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Current password is incorrect")
                )

            account.password_hash = await self.password_hasher.hash(new_password)
            account = await self.uow.accounts.update(account)

            revoked_count = await self.token_issuer.revoke_all(account.id)
            tokens = await self.token_issuer.issue(account)

            await self.audit_logger.record(
                SecurityAction.password_change, account_id=account.id, client=client
            )
            await self.audit_logger.record(
                SecurityAction.session_revoked,
                account_id=account.id,
                client=client,
                metadata={"reason": "password_change", "revoked_count": revoked_count},
            )

            await self.uow.commit()

            return Return.ok(
                PasswordChangedResponse(
                    message="Password changed successfully",
                    access_token=tokens.access_token,
                    refresh_token=tokens.refresh_token,
                )
            )
