import secrets

from src.app.repositories.account_repository import IAccountRepository

CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
MAX_ATTEMPTS = 10


def _segment(length: int) -> str:
    return "".join(secrets.choice(CHARS) for _ in range(length))


class AccountIdGenerator:
    """Generates unique human-readable account IDs: PREFIX-XXXXXX-XXXX"""

    def __init__(self, accounts: IAccountRepository, prefix: str = "AIGNC"):
        self.accounts = accounts
        self.prefix = prefix

    def candidate(self) -> str:
        return f"{self.prefix}-{_segment(6)}-{_segment(4)}"

    async def generate(self) -> str:
        for _ in range(MAX_ATTEMPTS):
            public_id = self.candidate()
            if await self.accounts.get_by_public_id(public_id) is None:
                return public_id
        raise RuntimeError(
            f"Failed to generate unique account ID after {MAX_ATTEMPTS} attempts"
        )
