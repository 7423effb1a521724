"""
Load Context Use Case

Loads the current account's public projection.
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.account_view import build_account_view
from .dtos import AccountResponse


class LoadContextUseCase:
    """
    Use case for loading the current account.

    Business Rules:
    - Account must exist
    - Returns the public projection with linked provider names
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, account_id: UUID) -> Result[AccountResponse]:
        async with self.uow:
            account = await self.uow.accounts.get_by_id(account_id)
            if account is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            links = await self.uow.provider_links.get_by_account_id(account.id)
            return Return.ok(AccountResponse(account=build_account_view(account, links)))
