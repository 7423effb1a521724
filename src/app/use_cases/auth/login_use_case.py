"""
Login Use Case

Handles password authentication under the lockout policy and issues tokens.
"""

from typing import Optional

from libs.result import Error, Result, Return
from src.app.services.audit_logger import AuditLogger, ClientInfo
from src.app.services.lockout_policy import LockoutPolicy
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.account_view import build_account_view
from src.domain.base import utcnow
from src.domain.entities import SecurityAction
from src.domain.validation import normalize_email
from .dtos import AuthResponse


class LoginUseCase:
    """
    Use case for password login and token issuance.

    Business Rules:
    - Same INVALID_CREDENTIALS error for unknown email and wrong password,
      and a hash is computed either way to keep timing similar
    - A locked account is rejected with ACCOUNT_LOCKED before the password
      is checked, and the attempt is not counted
    - A deactivated account is rejected with ACCOUNT_DEACTIVATED
    - A wrong password counts towards the lockout; the failure that reaches
      the threshold locks the account and answers ACCOUNT_LOCKED
    - Success resets the counter, clears the lock, bumps login tracking
    - Every outcome is recorded as a security event and committed
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_hasher: IPasswordHasher,
        token_issuer: TokenIssuer,
        audit_logger: AuditLogger,
        lockout_policy: LockoutPolicy,
    ):
        self.uow = uow
        self.password_hasher = password_hasher
        self.token_issuer = token_issuer
        self.audit_logger = audit_logger
        self.lockout_policy = lockout_policy

    async def execute(
        self, email: str, password: str, client: Optional[ClientInfo] = None
    ) -> Result[AuthResponse]:
        """
        Execute login use case.

        Args:
            email: Account email (any case)
            password: Plain text password
            client: Caller IP and user agent for the audit log

        Returns:
            Result with AuthResponse, or Error INVALID_CREDENTIALS /
            ACCOUNT_LOCKED / ACCOUNT_DEACTIVATED
        """
        invalid_credentials = Error("INVALID_CREDENTIALS", "Invalid email or password")
        locked = Error(
            "ACCOUNT_LOCKED",
            "Account is temporarily locked due to too many failed attempts. "
            "Please try again later.",
        )

        email_result = normalize_email(email)

        async with self.uow:
            now = utcnow()
            account = None
            if email_result.is_ok():
                account = await self.uow.accounts.get_by_email(email_result.value)

            if account is None:
                await self.password_hasher.verify(password, None)
                await self.audit_logger.record(
                    SecurityAction.login_failed,
                    client=client,
                    metadata={"reason": "unknown_email"},
                )
                await self.uow.commit()
                return Return.err(invalid_credentials)

            if self.lockout_policy.is_locked(account, now):
                await self.audit_logger.record(
                    SecurityAction.login_failed,
                    account_id=account.id,
                    client=client,
                    metadata={"reason": "account_locked"},
                )
                await self.uow.commit()
                return Return.err(locked)

            if not account.is_active:
                await self.audit_logger.record(
                    SecurityAction.login_failed,
                    account_id=account.id,
                    client=client,
                    metadata={"reason": "account_deactivated"},
                )
                await self.uow.commit()
                return Return.err(
                    Error(
                        "ACCOUNT_DEACTIVATED",
                        "Your account has been deactivated. Please contact support.",
                    )
                )

            if not await self.password_hasher.verify(password, account.password_hash):
                state = await self.lockout_policy.register_failure(
                    self.uow.accounts, account.id, now
                )
                await self.audit_logger.record(
                    SecurityAction.login_failed,
                    account_id=account.id,
                    client=client,
                    metadata={"reason": "invalid_password", "attempts": state.attempts},
                )
                if state.locked:
                    await self.audit_logger.record(
                        SecurityAction.account_locked,
                        account_id=account.id,
                        client=client,
                        metadata={
                            "attempts": state.attempts,
                            "lock_until": state.lock_until.isoformat()
                            if state.lock_until
                            else None,
                        },
                    )
                    await self.uow.commit()
                    return Return.err(locked)

                await self.uow.commit()
                return Return.err(invalid_credentials)

            lock_elapsed = self.lockout_policy.lock_expired(account, now)
            await self.lockout_policy.register_success(self.uow.accounts, account.id, now)
            if lock_elapsed:
                await self.audit_logger.record(
                    SecurityAction.account_unlocked,
                    account_id=account.id,
                    client=client,
                    metadata={"reason": "lock_expired"},
                )

            tokens = await self.token_issuer.issue(account)

            await self.audit_logger.record(
                SecurityAction.login_success,
                account_id=account.id,
                client=client,
            )

            links = await self.uow.provider_links.get_by_account_id(account.id)
            response = AuthResponse(
                account=build_account_view(account, links),
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
            )

            await self.uow.commit()

            return Return.ok(response)
