"""
Authorization predicates layered on top of the session guard.

Each factory returns a dependency that resolves to the CurrentAccount when
the check passes and raises FORBIDDEN otherwise:

    current: CurrentAccount = Depends(require_role(AccountRole.admin))
"""

from fastapi import Depends, status

from libs.result import Error
from src.api.error import ClientError
from src.app.use_cases.account_view import CurrentAccount
from src.depends import get_current_account
from src.domain.entities import AccountRole, SubscriptionPlan, SubscriptionStatus


def _forbidden(message: str) -> ClientError:
    return ClientError(Error("FORBIDDEN", message), status_code=status.HTTP_403_FORBIDDEN)


def check_role(account: CurrentAccount, *roles: AccountRole) -> None:
    if account.role not in {role.value for role in roles}:
        raise _forbidden("You do not have permission to perform this action")


def check_subscription(account: CurrentAccount, *plans: SubscriptionPlan) -> None:
    if account.subscription_status != SubscriptionStatus.active.value:
        raise _forbidden("An active subscription is required")
    if plans and account.subscription_plan not in {plan.value for plan in plans}:
        raise _forbidden("Your subscription plan does not include this feature")


def check_verified(account: CurrentAccount) -> None:
    if not account.is_verified:
        raise _forbidden("Please verify your email address first")


def require_role(*roles: AccountRole):
    async def dependency(
        account: CurrentAccount = Depends(get_current_account),
    ) -> CurrentAccount:
        check_role(account, *roles)
        return account

    return dependency


def require_subscription(*plans: SubscriptionPlan):
    """Active subscription, optionally restricted to the given plans"""

    async def dependency(
        account: CurrentAccount = Depends(get_current_account),
    ) -> CurrentAccount:
        check_subscription(account, *plans)
        return account

    return dependency


async def require_verified(
    account: CurrentAccount = Depends(get_current_account),
) -> CurrentAccount:
    check_verified(account)
    return account
