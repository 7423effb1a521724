"""
Confirm Password Reset Use Case

Handles password reset confirmation with secure token validation.
"""

from typing import Optional

from libs.result import Error, Result, Return
from src.app.services.audit_logger import AuditLogger, ClientInfo
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.token_issuer import TokenIssuer, hash_token
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import SecurityAction
from src.domain.validation import validate_password
from .dtos import MessageResponse


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming password reset.

    Business Rules:
    - Token is validated by hashing and comparing with stored hash
    - Token must not be expired (1 hour window)
    - New password must be at least 8 characters
    - Token is cleared after a successful reset (single-use)
    - All refresh tokens of the account are revoked
    - Security event recorded
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
        token: Optional[str],
        new_password: Optional[str],
        client: Optional[ClientInfo] = None,
    ) -> Result[MessageResponse]:
        """
        Execute confirm password reset use case.

        Args:
            token: Password reset token (plain text from email)
            new_password: New password to set

        Returns:
            Result with confirmation status, or Error

        Errors:
            - VALIDATION_ERROR: Missing token or password too short
            - INVALID_TOKEN: Token unknown or expired
        """
        if not token or not new_password:
            return Return.err(
                Error("VALIDATION_ERROR", "Token and new password are required")
            )

        password_validation = validate_password(new_password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        async with self.uow:
            account = await self.uow.accounts.get_by_reset_token_hash(hash_token(token))

            if (
                account is None
                or account.reset_password_expires is None
                or account.reset_password_expires < utcnow()
            ):
                return Return.err(
                    Error("INVALID_TOKEN", "Invalid or expired reset token")
                )

            account.password_hash = await self.password_hasher.hash(new_password)
            account.reset_password_token_hash = None
            account.reset_password_expires = None
            await self.uow.accounts.update(account)

            revoked_count = await self.token_issuer.revoke_all(account.id)

            await self.audit_logger.record(
                SecurityAction.password_reset_complete,
                account_id=account.id,
                client=client,
                metadata={"sessions_revoked": revoked_count},
            )

            await self.uow.commit()

            return Return.ok(
                MessageResponse(
                    status="success",
                    message="Password reset successfully. Please log in with your new password.",
                )
            )
