import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./portal.db")
    DB_TIMEOUT_SECONDS = float(data.get("DB_TIMEOUT_SECONDS", 5))
    API_PREFIX = data.get("API_PREFIX", "")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Tokens
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRES_DAYS = int(data.get("ACCESS_TOKEN_EXPIRES_DAYS", 7))
    REFRESH_TOKEN_EXPIRES_DAYS = int(data.get("REFRESH_TOKEN_EXPIRES_DAYS", 30))
    MAX_REFRESH_TOKENS = int(data.get("MAX_REFRESH_TOKENS", 5))

    # Credentials and lockout
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))
    MAX_LOGIN_ATTEMPTS = int(data.get("MAX_LOGIN_ATTEMPTS", 5))
    LOCKOUT_MINUTES = int(data.get("LOCKOUT_MINUTES", 30))
    VERIFICATION_TOKEN_HOURS = int(data.get("VERIFICATION_TOKEN_HOURS", 24))
    PASSWORD_RESET_HOURS = int(data.get("PASSWORD_RESET_HOURS", 1))
    ACCOUNT_ID_PREFIX = data.get("ACCOUNT_ID_PREFIX", "AIGNC")

    # Redirects and cookies
    BASE_URL = data.get("BASE_URL", "http://localhost:8000")
    PORTAL_URL = data.get("PORTAL_URL", "/portal")
    LOGIN_URL = data.get("LOGIN_URL", "/login")
    COOKIE_SECURE = bool(data.get("COOKIE_SECURE", False))

    # Billing system and other internal integrations
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")

    # OAuth: {"google": {"client_id": ..., "client_secret": ...}, ...}
    OAUTH_PROVIDERS = data.get("OAUTH_PROVIDERS", {})
    OAUTH_HTTP_TIMEOUT_SECONDS = float(data.get("OAUTH_HTTP_TIMEOUT_SECONDS", 10))
