"""
Update Organization Use Case
"""

from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.audit_logger import AuditLogger, ClientInfo
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.account_view import build_organization_view
from src.domain.entities import SecurityAction
from src.domain.validation import slugify, validate_industry
from .dtos import OrganizationResponse, UpdateOrganizationCommand

MAX_ORGANIZATION_NAME_LENGTH = 255


class UpdateOrganizationUseCase:
    """
    Use case for editing the caller's embedded organization.

    Business Rules:
    - Name, industry and logo are editable; the route restricts callers to
      admins and managers
    - A new name regenerates the slug
    - Records profile_update with the names of the changed fields
    """

    def __init__(self, uow: UnitOfWork, audit_logger: AuditLogger):
        self.uow = uow
        self.audit_logger = audit_logger

    async def execute(
        self,
        account_id: UUID,
        command: UpdateOrganizationCommand,
        client: Optional[ClientInfo] = None,
    ) -> Result[OrganizationResponse]:
        changes = {}
        if command.name is not None:
            name = command.name.strip()
            if not name:
                return Return.err(Error("VALIDATION_ERROR", "Organization name is required"))
            if len(name) > MAX_ORGANIZATION_NAME_LENGTH:
                return Return.err(
                    Error(
                        "VALIDATION_ERROR",
                        f"Organization name must be at most "
                        f"{MAX_ORGANIZATION_NAME_LENGTH} characters",
                    )
                )
            changes["organization_name"] = name
            changes["organization_slug"] = slugify(name)
        if command.industry is not None:
            industry = validate_industry(command.industry)
            if industry.is_err():
                return Return.err(industry.error)
            changes["organization_industry"] = industry.value
        if command.logo is not None:
            changes["organization_logo"] = command.logo.strip() or None

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

            response = OrganizationResponse(organization=build_organization_view(account))

            await self.uow.commit()

            return Return.ok(response)
