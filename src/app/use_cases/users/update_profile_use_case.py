"""
Update Profile Use Case
"""

from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.audit_logger import AuditLogger, ClientInfo
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.account_view import build_account_view
from src.domain.entities import SecurityAction
from src.domain.validation import validate_name
from .dtos import AccountResponse, UpdateProfileCommand


class UpdateProfileUseCase:
    """
    Use case for editing the caller's own profile.

    Business Rules:
    - Only first name, last name, phone and avatar are editable here
    - Names keep the registration limits (required, at most 50 characters)
    - Records profile_update with the names of the changed fields
    """

    def __init__(self, uow: UnitOfWork, audit_logger: AuditLogger):
        self.uow = uow
        self.audit_logger = audit_logger

    async def execute(
        self,
        account_id: UUID,
        command: UpdateProfileCommand,
        client: Optional[ClientInfo] = None,
    ) -> Result[AccountResponse]:
        changes = {}
        if command.first_name is not None:
            first_name = validate_name(command.first_name, "First name")
            if first_name.is_err():
                return Return.err(first_name.error)
            changes["first_name"] = first_name.value
        if command.last_name is not None:
            last_name = validate_name(command.last_name, "Last name")
            if last_name.is_err():
                return Return.err(last_name.error)
            changes["last_name"] = last_name.value
        if command.phone is not None:
            changes["phone"] = command.phone.strip() or None
        if command.avatar is not None:
            changes["avatar"] = command.avatar.strip() or None

        async with self.uow:
            account = await self.uow.accounts.get_by_id(account_id)
            if account is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            if changes:
                for field, value in changes.items():
                    setattr(account, field, value)
                account = await self.uow.accounts.update(account)

                await self.audit_logger.record(
                    SecurityAction.profile_update,
                    account_id=account.id,
                    client=client,
                    metadata={"fields": sorted(changes)},
                )

            links = await self.uow.provider_links.get_by_account_id(account.id)
            response = AccountResponse(account=build_account_view(account, links))

            await self.uow.commit()

            return Return.ok(response)
