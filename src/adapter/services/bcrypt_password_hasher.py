import logging
from typing import Optional

import bcrypt
from starlette.concurrency import run_in_threadpool

from src.app.services.password_hasher import IPasswordHasher

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes; newer releases reject longer input
BCRYPT_MAX_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:BCRYPT_MAX_BYTES]


class BcryptPasswordHasher(IPasswordHasher):
    """
    bcrypt implementation of the password hasher.

    Hashing is CPU bound, so both operations run in the threadpool to keep
    the event loop serving other requests.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def _hash(self, plaintext: str) -> str:
        return bcrypt.hashpw(_encode(plaintext), bcrypt.gensalt(self.rounds)).decode(
            "utf-8"
        )

    def _verify(self, plaintext: str, digest: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(plaintext), digest.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is malformed")
            return False

    async def hash(self, plaintext: str) -> str:
        return await run_in_threadpool(self._hash, plaintext)

    async def verify(self, plaintext: str, digest: Optional[str]) -> bool:
        if not digest:
            # Keep timing close to a real check for accounts without a password
            await run_in_threadpool(self._hash, plaintext)
            return False
        return await run_in_threadpool(self._verify, plaintext, digest)
