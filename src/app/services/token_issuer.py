"""
Token Issuer

Mints access tokens and rotating refresh tokens.

Business Rules:
- Access token: signed JWT carrying the account ID only
- Refresh token: 48 random bytes, url-safe; only its SHA-256 hash is stored
- Each account keeps at most max_refresh_tokens; expired ones are pruned
  first, then the oldest are evicted
- Rotation deletes the presented token before issuing a new pair, so a
  replayed or raced token fails with REFRESH_INVALID
"""

import hashlib
import secrets
from datetime import timedelta
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from libs.result import Error, Result, Return
from src.api.utils.jwt import AccessTokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import Account, RefreshToken

REFRESH_TOKEN_BYTES = 48


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


class IssuedTokens(BaseModel):
    access_token: str
    refresh_token: str


class RotatedTokens(BaseModel):
    account_id: UUID
    tokens: IssuedTokens


class TokenIssuer:
    def __init__(
        self,
        uow: UnitOfWork,
        codec: AccessTokenCodec,
        refresh_token_lifetime: timedelta = timedelta(days=30),
        max_refresh_tokens: int = 5,
    ):
        self.uow = uow
        self.codec = codec
        self.refresh_token_lifetime = refresh_token_lifetime
        self.max_refresh_tokens = max_refresh_tokens

    async def issue(self, account: Account) -> IssuedTokens:
        now = utcnow()
        refresh_token = secrets.token_urlsafe(REFRESH_TOKEN_BYTES)

        await self.uow.refresh_tokens.delete_expired(account.id, now)
        await self.uow.refresh_tokens.create(
            RefreshToken(
                account_id=account.id,
                token_hash=hash_token(refresh_token),
                created_at=now,
                expires_at=now + self.refresh_token_lifetime,
            )
        )
        await self.uow.refresh_tokens.delete_oldest_beyond(
            account.id, self.max_refresh_tokens
        )

        return IssuedTokens(
            access_token=self.codec.encode(account.id),
            refresh_token=refresh_token,
        )

    async def rotate(self, refresh_token: str) -> Result[RotatedTokens]:
        invalid = Error("REFRESH_INVALID", "Invalid or expired refresh token")
        now = utcnow()
        token_hash = hash_token(refresh_token)

        stored = await self.uow.refresh_tokens.find_active_by_hash(token_hash, now)
        if stored is None:
            return Return.err(invalid)
        account_id = stored.account_id

        # Only the request whose DELETE removes the row may continue
        if not await self.uow.refresh_tokens.claim(token_hash, now):
            return Return.err(invalid)

        account = await self.uow.accounts.get_by_id(account_id)
        if account is None or not account.is_active:
            return Return.err(invalid)

        tokens = await self.issue(account)
        return Return.ok(RotatedTokens(account_id=account.id, tokens=tokens))

    async def revoke_all(self, account_id: UUID) -> int:
        return await self.uow.refresh_tokens.delete_all_by_account_id(account_id)

    async def revoke_one(self, account_id: UUID, refresh_token: str) -> bool:
        return await self.uow.refresh_tokens.delete_by_hash(
            hash_token(refresh_token), account_id=account_id
        )

    async def revoke_token(self, refresh_token: str) -> Optional[UUID]:
        """Remove a token without an account context (logout). Returns its owner."""
        stored = await self.uow.refresh_tokens.find_active_by_hash(
            hash_token(refresh_token), utcnow()
        )
        if stored is None:
            return None
        account_id = stored.account_id
        removed = await self.revoke_one(account_id, refresh_token)
        return account_id if removed else None
