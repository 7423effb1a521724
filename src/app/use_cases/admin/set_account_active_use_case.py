"""
Use Case: Deactivate / Reactivate Account

Administrative switch on Account.is_active. Accounts are never deleted.
"""

from libs.result import Error, Result, Return
from src.app.services.audit_logger import AuditLogger
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.account_view import CamelModel
from src.domain.entities import SecurityAction


class SetAccountActiveResponse(CamelModel):
    """Response DTO for SetAccountActiveUseCase"""

    public_id: str
    is_active: bool
    sessions_revoked: int


class SetAccountActiveUseCase:
    """
    Deactivate or reactivate an account.

    Business Logic:
    1. Validate account exists
    2. Update is_active
    3. On deactivation, revoke all refresh tokens; the session guard rejects
       outstanding access tokens because it re-reads the account
    4. Record session_revoked when tokens were dropped

    Idempotent: deactivating an inactive account succeeds and revokes 0
    """

    def __init__(self, uow: UnitOfWork, token_issuer: TokenIssuer, audit_logger: AuditLogger):
        self.uow = uow
        self.token_issuer = token_issuer
        self.audit_logger = audit_logger

    async def execute(self, public_id: str, active: bool) -> Result[SetAccountActiveResponse]:
        async with self.uow:
            account = await self.uow.accounts.get_by_public_id(public_id)
            if account is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            account.is_active = active
            account = await self.uow.accounts.update(account)

            sessions_revoked = 0
            if not active:
                sessions_revoked = await self.token_issuer.revoke_all(account.id)
                await self.audit_logger.record(
                    SecurityAction.session_revoked,
                    account_id=account.id,
                    metadata={"reason": "account_deactivated", "revoked_count": sessions_revoked},
                )

            await self.uow.commit()

            return Return.ok(
                SetAccountActiveResponse(
                    public_id=account.public_id,
                    is_active=account.is_active,
                    sessions_revoked=sessions_revoked,
                )
            )
