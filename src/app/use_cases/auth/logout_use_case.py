"""
Logout Use Case

Best-effort revocation of the presented refresh token.
"""

from typing import Optional

from libs.result import Result, Return
from src.app.services.audit_logger import AuditLogger, ClientInfo
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import SecurityAction
from .dtos import MessageResponse


class LogoutUseCase:
    """
    Use case for logging out.

    Business Rules:
    - Always succeeds, with or without a token
    - A known refresh token is removed from its owner's list
    - The logout is recorded against the token's owner
    """

    def __init__(self, uow: UnitOfWork, token_issuer: TokenIssuer, audit_logger: AuditLogger):
        self.uow = uow
        self.token_issuer = token_issuer
        self.audit_logger = audit_logger

    async def execute(
        self, refresh_token: Optional[str], client: Optional[ClientInfo] = None
    ) -> Result[MessageResponse]:
        response = MessageResponse(status="logged_out", message="Logged out successfully")
        if not refresh_token:
            return Return.ok(response)

        async with self.uow:
            account_id = await self.token_issuer.revoke_token(refresh_token)
            if account_id is not None:
                await self.audit_logger.record(
                    SecurityAction.logout, account_id=account_id, client=client
                )
            await self.uow.commit()

        return Return.ok(response)
