"""
Lockout Policy

Temporarily suspends password authentication after repeated failures.

States:
- Unlocked: lock_until is empty or in the past
- Locked: lock_until in the future; attempts are rejected and not counted

The counter lives on the account row and is only changed through single
conditional UPDATE statements, so concurrent failures cannot under-count.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from src.app.repositories.account_repository import IAccountRepository
from src.domain.entities import Account


@dataclass(frozen=True)
class LockoutState:
    attempts: int
    lock_until: Optional[datetime]
    locked: bool


class LockoutPolicy:
    def __init__(self, max_attempts: int = 5, lock_duration: timedelta = timedelta(minutes=30)):
        self.max_attempts = max_attempts
        self.lock_duration = lock_duration

    def is_locked(self, account: Account, now: datetime) -> bool:
        return account.is_locked(now)

    def lock_expired(self, account: Account, now: datetime) -> bool:
        """True when a previous lock is still recorded but has elapsed"""
        return account.lock_until is not None and account.lock_until <= now

    async def register_failure(
        self, accounts: IAccountRepository, account_id: UUID, now: datetime
    ) -> LockoutState:
        state = await accounts.record_failed_login(
            account_id,
            now=now,
            max_attempts=self.max_attempts,
            lock_until=now + self.lock_duration,
        )
        if not state.applied:
            # A concurrent failure locked the account first
            return LockoutState(state.attempts, state.lock_until, locked=True)
        locked = state.lock_until is not None and state.lock_until > now
        return LockoutState(state.attempts, state.lock_until, locked=locked)

    async def register_success(
        self, accounts: IAccountRepository, account_id: UUID, now: datetime
    ) -> None:
        await accounts.record_successful_login(account_id, now)
