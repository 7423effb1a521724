import logging
import time
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain.entities  # noqa: F401  (registers tables on SQLModel.metadata)
from src.adapter.services.bcrypt_password_hasher import BcryptPasswordHasher
from src.adapter.services.logging_email_sender import LoggingEmailSender
from src.adapter.services.oauth_providers import build_oauth_providers
from src.api.utils.jwt import AccessTokenCodec
from src.app.services.lockout_policy import LockoutPolicy
from src.app.services.oauth_provider import OAuthProviderError
from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"error": {"code": code, "message": message}}
    )


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"Server error: {exc.base_error.code}")
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, exc.base_error.code, "Internal server error"
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
    logger.warning(f"Client error: VALIDATION_ERROR {message}")
    return _error_response(status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", message)


async def handle_database_unavailable(request: Request, exc: Exception):
    logger.error(f"Database unavailable: {type(exc).__name__}")
    return _error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "TRANSIENT",
        "Service temporarily unavailable. Please retry.",
    )


async def handle_oauth_provider_error(request: Request, exc: OAuthProviderError):
    logger.error(f"OAuth provider error: {exc}")
    return _error_response(
        status.HTTP_502_BAD_GATEWAY,
        "TRANSIENT",
        "Identity provider unavailable. Please retry.",
    )


def create_app(ApplicationConfig) -> FastAPI:
    engine = create_async_engine(
        ApplicationConfig.DB_URI,
        echo=False,
        connect_args={"timeout": ApplicationConfig.DB_TIMEOUT_SECONDS},
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        yield
        await engine.dispose()

    app = FastAPI(title="Portal Auth API", version="0.1.0", lifespan=lifespan)

    app.state.config = ApplicationConfig
    app.state.engine = engine
    app.state.session_factory = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    app.state.password_hasher = BcryptPasswordHasher(rounds=ApplicationConfig.BCRYPT_ROUNDS)
    app.state.access_token_codec = AccessTokenCodec(
        ApplicationConfig.JWT_SECRET,
        algorithm=ApplicationConfig.JWT_ALGORITHM,
        expires_delta=timedelta(days=ApplicationConfig.ACCESS_TOKEN_EXPIRES_DAYS),
    )
    app.state.email_sender = LoggingEmailSender()
    app.state.oauth_providers = build_oauth_providers(
        ApplicationConfig.OAUTH_PROVIDERS,
        timeout=ApplicationConfig.OAUTH_HTTP_TIMEOUT_SECONDS,
    )
    app.state.lockout_policy = LockoutPolicy(
        max_attempts=ApplicationConfig.MAX_LOGIN_ATTEMPTS,
        lock_duration=timedelta(minutes=ApplicationConfig.LOCKOUT_MINUTES),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if ApplicationConfig.ENABLE_LOGGING_MIDDLEWARE:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms"
            )
            return response

    from src.api.routes import admin, audit, auth, health_check, oauth, portal, sessions, user

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health_check.router, tags=["Health"])
    # Static /auth routes must be matched before /auth/{provider}
    app.include_router(auth.router, prefix=prefix, tags=["Authentication"])
    app.include_router(oauth.router, prefix=prefix, tags=["OAuth"])
    app.include_router(user.router, prefix=prefix, tags=["User"])
    app.include_router(sessions.router, prefix=prefix, tags=["Sessions"])
    app.include_router(portal.router, prefix=prefix, tags=["Portal"])
    app.include_router(audit.router, prefix=prefix, tags=["Audit"])
    app.include_router(admin.router, prefix=prefix, tags=["Admin"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(OperationalError, handle_database_unavailable)
    app.add_exception_handler(PoolTimeoutError, handle_database_unavailable)
    app.add_exception_handler(OAuthProviderError, handle_oauth_provider_error)

    return app
