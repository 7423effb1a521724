from abc import ABC, abstractmethod
from typing import Optional


class IPasswordHasher(ABC):
    """One-way password hashing contract - application layer"""

    @abstractmethod
    async def hash(self, plaintext: str) -> str:
        """Return a salted slow hash of the password"""
        pass

    @abstractmethod
    async def verify(self, plaintext: str, digest: Optional[str]) -> bool:
        """Check a password against a stored hash. False for a missing hash."""
        pass
