from typing import Dict, List, Tuple

from config import ApplicationConfig
from src.app.services.email_sender import IEmailSender
from src.app.services.oauth_provider import IOAuthProvider, OAuthProfile, OAuthProviderError
from src.domain.entities import Account

ADMIN_API_KEY = "integration-admin-key"
PASSWORD = "Secret123"


class IntegrationConfig(ApplicationConfig):
    DB_URI = "sqlite+aiosqlite://"
    API_PREFIX = ""
    BCRYPT_ROUNDS = 4
    ENABLE_LOGGING_MIDDLEWARE = False
    JWT_SECRET = "integration-test-secret"
    ADMIN_API_KEY = ADMIN_API_KEY
    BASE_URL = "http://test"
    PORTAL_URL = "/portal"
    LOGIN_URL = "/login"
    MAX_LOGIN_ATTEMPTS = 5
    MAX_REFRESH_TOKENS = 5


class RecordingEmailSender(IEmailSender):
    """Keeps every dispatched email so tests can follow the links"""

    def __init__(self):
        self.sent: List[Tuple[str, str, str]] = []

    async def send_welcome_email(self, account: Account) -> None:
        self.sent.append(("welcome", account.email, ""))

    async def send_verification_email(self, account: Account, token: str) -> None:
        self.sent.append(("verification", account.email, token))

    async def send_password_reset_email(self, account: Account, token: str) -> None:
        self.sent.append(("password_reset", account.email, token))

    def last_token(self, kind: str, email: str) -> str:
        for sent_kind, sent_email, token in reversed(self.sent):
            if sent_kind == kind and sent_email == email:
                return token
        raise AssertionError(f"no {kind} email sent to {email}")


class FakeOAuthProvider(IOAuthProvider):
    """Answers the code exchange with a preset profile per code"""

    def __init__(self, name: str):
        self.name = name
        self.profiles: Dict[str, OAuthProfile] = {}

    def authorization_url(self, state: str, redirect_uri: str) -> str:
        return f"https://idp.example/{self.name}/authorize?state={state}"

    async def fetch_profile(self, code: str, redirect_uri: str) -> OAuthProfile:
        if code not in self.profiles:
            raise OAuthProviderError(f"{self.name} rejected the authorization code")
        return self.profiles[code]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
