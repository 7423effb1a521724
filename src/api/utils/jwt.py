from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from libs.result import Error, Result, Return


class AccessTokenCodec:
    """
    Signs and verifies access tokens.

    The token carries the account identity only (sub). Role and subscription
    are re-read from storage on each request so they never go stale.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_delta: timedelta = timedelta(days=7),
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_delta = expires_delta

    def encode(self, account_id: UUID, expires_delta: Optional[timedelta] = None) -> str:
        """
        Generate JWT access token

        Args:
            account_id: Account UUID
            expires_delta: Override of the configured lifetime

        Returns:
            JWT token string
        """
        now = datetime.now(UTC)
        payload = {
            "sub": str(account_id),
            "iat": now,
            "exp": now + (expires_delta or self.expires_delta),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Result[UUID]:
        """
        Verify and decode JWT token

        Returns:
            Result with the account UUID, or Error TOKEN_EXPIRED / INVALID_TOKEN
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            return Return.err(
                Error("TOKEN_EXPIRED", "Token expired. Please log in again.")
            )
        except JWTError:
            return Return.err(Error("INVALID_TOKEN", "Invalid token."))

        try:
            return Return.ok(UUID(payload["sub"]))
        except (KeyError, TypeError, ValueError):
            return Return.err(Error("INVALID_TOKEN", "Invalid token."))
