"""
Use Case: Change Subscription

Billing integration endpoint that records a plan or status change for an
account. Billing itself stays with the billing system.
"""

from datetime import datetime
from typing import Optional

from libs.result import Error, Result, Return
from src.app.services.audit_logger import AuditLogger
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.account_view import (
    CamelModel,
    SubscriptionView,
    build_subscription_view,
)
from src.domain.entities import SecurityAction
from src.domain.validation import validate_subscription_plan, validate_subscription_status


class ChangeSubscriptionCommand(CamelModel):
    plan: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class ChangeSubscriptionResponse(CamelModel):
    """Response DTO for ChangeSubscriptionUseCase"""

    public_id: str
    subscription: SubscriptionView


class ChangeSubscriptionUseCase:
    """
    Apply a subscription change pushed by the billing system.

    Business Logic:
    1. Validate plan and status against the closed vocabularies
    2. Load account by public ID
    3. Update plan/status/dates
    4. Record subscription_change with the previous and new values

    Access tokens carry no plan, so the change is visible on the next request.
    """

    def __init__(self, uow: UnitOfWork, audit_logger: AuditLogger):
        self.uow = uow
        self.audit_logger = audit_logger

    async def execute(
        self, public_id: str, command: ChangeSubscriptionCommand
    ) -> Result[ChangeSubscriptionResponse]:
        """
        Execute change subscription use case.

        Returns:
            Result[ChangeSubscriptionResponse], or Error VALIDATION_ERROR /
            ACCOUNT_NOT_FOUND
        """
        plan = None
        if command.plan is not None:
            plan_result = validate_subscription_plan(command.plan)
            if plan_result.is_err():
                return Return.err(plan_result.error)
            plan = plan_result.value

        status = None
        if command.status is not None:
            status_result = validate_subscription_status(command.status)
            if status_result.is_err():
                return Return.err(status_result.error)
            status = status_result.value

        async with self.uow:
            account = await self.uow.accounts.get_by_public_id(public_id)
            if account is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            previous = build_subscription_view(account)

            if plan is not None:
                account.subscription_plan = plan
            if status is not None:
                account.subscription_status = status
            if command.start_date is not None:
                account.subscription_start = command.start_date
            if command.end_date is not None:
                account.subscription_end = command.end_date
            account = await self.uow.accounts.update(account)

            current = build_subscription_view(account)
            await self.audit_logger.record(
                SecurityAction.subscription_change,
                account_id=account.id,
                metadata={
                    "from": {"plan": previous.plan, "status": previous.status},
                    "to": {"plan": current.plan, "status": current.status},
                },
            )

            await self.uow.commit()

            return Return.ok(
                ChangeSubscriptionResponse(public_id=account.public_id, subscription=current)
            )
