import logging

from src.app.services.email_sender import IEmailSender
from src.domain.entities import Account

logger = logging.getLogger(__name__)


class LoggingEmailSender(IEmailSender):
    """
    Email sender that records each dispatch in the log.

    Delivery belongs to the email collaborator. Tokens are never logged.
    """

    async def send_welcome_email(self, account: Account) -> None:
        logger.info("Dispatching welcome email to account %s", account.public_id)

    async def send_verification_email(self, account: Account, token: str) -> None:
        logger.info("Dispatching verification email to account %s", account.public_id)

    async def send_password_reset_email(self, account: Account, token: str) -> None:
        logger.info("Dispatching password reset email to account %s", account.public_id)
