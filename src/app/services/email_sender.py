from abc import ABC, abstractmethod

from src.domain.entities import Account


class IEmailSender(ABC):
    """Outbound account email - delivery is owned by the email collaborator"""

    @abstractmethod
    async def send_welcome_email(self, account: Account) -> None:
        pass

    @abstractmethod
    async def send_verification_email(self, account: Account, token: str) -> None:
        pass

    @abstractmethod
    async def send_password_reset_email(self, account: Account, token: str) -> None:
        pass
