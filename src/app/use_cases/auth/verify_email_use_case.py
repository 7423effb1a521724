"""
Verify Email Use Case

Handles email verification via the single-use token sent at registration.
"""

from typing import Optional

from libs.result import Error, Result, Return
from src.app.services.audit_logger import AuditLogger, ClientInfo
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import SecurityAction
from .dtos import MessageResponse


class VerifyEmailUseCase:
    """
    Use case for email verification.

    Business Rules:
    - Token must match an account's verification_token
    - Token must not be expired (24 hours from registration)
    - Sets is_verified = True
    - Clears verification token (single-use)
    - Records email_verified security event
    """

    def __init__(self, uow: UnitOfWork, audit_logger: AuditLogger):
        self.uow = uow
        self.audit_logger = audit_logger

    async def execute(
        self, token: Optional[str], client: Optional[ClientInfo] = None
    ) -> Result[MessageResponse]:
        """
        Execute email verification use case.

        Args:
            token: Verification token from email link

        Returns:
            Result with verification status, or Error

        Errors:
            - INVALID_TOKEN: Token missing, unknown or expired
        """
        invalid = Error("INVALID_TOKEN", "Invalid verification token")
        if not token:
            return Return.err(Error("INVALID_TOKEN", "Verification token required"))

        async with self.uow:
            account = await self.uow.accounts.get_by_verification_token(token)
            if account is None:
                return Return.err(invalid)

            if (
                account.verification_expires_at is not None
                and account.verification_expires_at < utcnow()
            ):
                return Return.err(invalid)

            account.is_verified = True
            account.verification_token = None
            account.verification_expires_at = None
            await self.uow.accounts.update(account)

            await self.audit_logger.record(
                SecurityAction.email_verified, account_id=account.id, client=client
            )

            await self.uow.commit()

            return Return.ok(
                MessageResponse(status="verified", message="Email successfully verified")
            )
