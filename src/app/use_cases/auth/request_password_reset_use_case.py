"""
Request Password Reset Use Case

Handles generating and sending password reset tokens.
"""

import logging
import secrets
from datetime import timedelta
from typing import Optional

from libs.result import Result, Return
from src.app.services.audit_logger import AuditLogger, ClientInfo
from src.app.services.email_sender import IEmailSender
from src.app.services.token_issuer import hash_token
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import SecurityAction
from src.domain.validation import normalize_email
from .dtos import MessageResponse

logger = logging.getLogger(__name__)


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - Generate cryptographically secure token
    - Hash token with SHA-256 before storing; a new request replaces the
      previous token
    - Token expires in 1 hour
    - No email enumeration (same response for known and unknown emails)
    - Security event recorded for known accounts
    """

    def __init__(
        self,
        uow: UnitOfWork,
        audit_logger: AuditLogger,
        email_sender: IEmailSender,
        reset_lifetime: timedelta = timedelta(hours=1),
    ):
        self.uow = uow
        self.audit_logger = audit_logger
        self.email_sender = email_sender
        self.reset_lifetime = reset_lifetime

    async def execute(
        self, email: Optional[str], client: Optional[ClientInfo] = None
    ) -> Result[MessageResponse]:
        """
        Execute request password reset use case.

        Note:
            Always returns success, even if the email doesn't exist.
            A token is only generated if it does.
        """
        response = MessageResponse(
            status="sent",
            message="If an account exists, a reset link will be sent",
        )

        email_result = normalize_email(email)
        if email_result.is_err():
            return Return.ok(response)

        async with self.uow:
            account = await self.uow.accounts.get_by_email(email_result.value)
            if account is None:
                return Return.ok(response)

            reset_token = secrets.token_urlsafe(32)
            account.reset_password_token_hash = hash_token(reset_token)
            account.reset_password_expires = utcnow() + self.reset_lifetime
            account = await self.uow.accounts.update(account)

            await self.audit_logger.record(
                SecurityAction.password_reset_request, account_id=account.id, client=client
            )

            await self.uow.commit()

            try:
                await self.email_sender.send_password_reset_email(account, reset_token)
            except Exception:
                logger.exception("Failed to dispatch password reset email for %s", account.public_id)

        return Return.ok(response)
