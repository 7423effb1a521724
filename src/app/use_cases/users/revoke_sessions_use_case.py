"""
Revoke Sessions Use Case

Signs the caller out everywhere by dropping every refresh token.
"""

from typing import Optional
from uuid import UUID

from libs.result import Result, Return
from src.app.services.audit_logger import AuditLogger, ClientInfo
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import SecurityAction
from .dtos import SessionsRevokedResponse


class RevokeSessionsUseCase:
    """
    Use case for revoking all of the caller's sessions.

    Business Rules:
    - Every refresh token of the account is deleted
    - Access tokens already issued stay valid until they expire
    - Revocation is recorded as session_revoked
    """

    def __init__(self, uow: UnitOfWork, token_issuer: TokenIssuer, audit_logger: AuditLogger):
        self.uow = uow
        self.token_issuer = token_issuer
        self.audit_logger = audit_logger

    async def execute(
        self, account_id: UUID, client: Optional[ClientInfo] = None
    ) -> Result[SessionsRevokedResponse]:
        async with self.uow:
            count = await self.token_issuer.revoke_all(account_id)

            await self.audit_logger.record(
                SecurityAction.session_revoked,
                account_id=account_id,
                client=client,
                metadata={"reason": "user_request", "revoked_count": count},
            )

            await self.uow.commit()

            return Return.ok(SessionsRevokedResponse(revoked_count=count))
