"""
Refresh Token Use Case

Handles access token refresh with refresh token rotation.
"""

from libs.result import Error, Result, Return
from src.app.services.token_issuer import TokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from .dtos import TokenPairResponse


class RefreshTokenUseCase:
    """
    Use case for refreshing access tokens.

    Business Rules:
    - Refresh token rotation: the presented token is deleted, a new pair issued
    - Token must exist and must not be expired
    - A token is accepted at most once; a replay or a losing race fails
      with REFRESH_INVALID
    - Account must still be active
    """

    def __init__(self, uow: UnitOfWork, token_issuer: TokenIssuer):
        self.uow = uow
        self.token_issuer = token_issuer

    async def execute(self, refresh_token: str) -> Result[TokenPairResponse]:
        """
        Execute refresh token use case.

        Args:
            refresh_token: The refresh token to verify and rotate

        Returns:
            Result with TokenPairResponse containing new tokens, or Error
        """
        if not refresh_token:
            return Return.err(Error("REFRESH_INVALID", "Refresh token required"))

        async with self.uow:
            rotated = await self.token_issuer.rotate(refresh_token)
            if rotated.is_err():
                return Return.err(rotated.error)

            await self.uow.commit()

            tokens = rotated.value.tokens
            return Return.ok(
                TokenPairResponse(
                    access_token=tokens.access_token,
                    refresh_token=tokens.refresh_token,
                )
            )
