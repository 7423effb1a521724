"""
Auth cookies for browser clients.

token: access token, sent on every request
refreshToken: refresh token, only sent to the auth routes
"""

from fastapi import Response

ACCESS_COOKIE = "token"
REFRESH_COOKIE = "refreshToken"
OAUTH_STATE_COOKIE = "oauthState"

OAUTH_STATE_MAX_AGE = 600


def refresh_cookie_path(config) -> str:
    return f"{config.API_PREFIX}/auth"


def set_auth_cookies(response: Response, access_token: str, refresh_token: str, config) -> None:
    response.set_cookie(
        ACCESS_COOKIE,
        access_token,
        max_age=config.ACCESS_TOKEN_EXPIRES_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=config.COOKIE_SECURE,
        samesite="lax",
    )
    response.set_cookie(
        REFRESH_COOKIE,
        refresh_token,
        max_age=config.REFRESH_TOKEN_EXPIRES_DAYS * 24 * 60 * 60,
        path=refresh_cookie_path(config),
        httponly=True,
        secure=config.COOKIE_SECURE,
        samesite="lax",
    )


def clear_auth_cookies(response: Response, config) -> None:
    response.delete_cookie(
        ACCESS_COOKIE, httponly=True, secure=config.COOKIE_SECURE, samesite="lax"
    )
    response.delete_cookie(
        REFRESH_COOKIE,
        path=refresh_cookie_path(config),
        httponly=True,
        secure=config.COOKIE_SECURE,
        samesite="lax",
    )


def set_oauth_state_cookie(response: Response, state: str, config) -> None:
    response.set_cookie(
        OAUTH_STATE_COOKIE,
        state,
        max_age=OAUTH_STATE_MAX_AGE,
        path=refresh_cookie_path(config),
        httponly=True,
        secure=config.COOKIE_SECURE,
        samesite="lax",
    )


def clear_oauth_state_cookie(response: Response, config) -> None:
    response.delete_cookie(
        OAUTH_STATE_COOKIE,
        path=refresh_cookie_path(config),
        httponly=True,
        secure=config.COOKIE_SECURE,
        samesite="lax",
    )
