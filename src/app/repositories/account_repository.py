from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import Account


class DuplicateEmailError(Exception):
    """Raised when the unique email constraint rejects a new account"""


@dataclass(frozen=True)
class FailedLoginState:
    """Counter state after an atomic failed-login update"""

    attempts: int
    lock_until: Optional[datetime]
    applied: bool


class IAccountRepository(ABC):
    """Account repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, account_id: UUID) -> Optional[Account]:
        """Get account by ID"""
        pass

    @abstractmethod
    async def get_by_public_id(self, public_id: str) -> Optional[Account]:
        """Get account by its human-readable public ID"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Account]:
        """Get account by email address (case-insensitive)"""
        pass

    @abstractmethod
    async def get_by_provider_identity(
        self, provider: str, provider_id: str
    ) -> Optional[Account]:
        """Get the account linked to an external (provider, provider_id) pair"""
        pass

    @abstractmethod
    async def get_by_verification_token(self, token: str) -> Optional[Account]:
        """Get account by email verification token"""
        pass

    @abstractmethod
    async def get_by_reset_token_hash(self, token_hash: str) -> Optional[Account]:
        """Get account by SHA-256 hash of its password reset token"""
        pass

    @abstractmethod
    async def create(self, account: Account) -> Account:
        """Create a new account. Raises DuplicateEmailError if the email is taken."""
        pass

    @abstractmethod
    async def update(self, account: Account) -> Account:
        """Update existing account"""
        pass

    @abstractmethod
    async def record_failed_login(
        self, account_id: UUID, now: datetime, max_attempts: int, lock_until: datetime
    ) -> FailedLoginState:
        """
        Atomically count a failed login.

        A single conditional UPDATE: restarts the counter at 1 when the previous
        lock has elapsed, sets lock_until once max_attempts is reached, and
        matches no row while the account is still locked (applied=False).
        """
        pass

    @abstractmethod
    async def record_successful_login(self, account_id: UUID, now: datetime) -> None:
        """Atomically reset lockout state and bump login tracking"""
        pass
