"""Authentication routes.

Handles Google OAuth login flow and session management.

## OAuth Flow

1. GET /auth/google/login - Redirect to Google consent screen
2. GET /auth/google/callback - Handle OAuth callback
3. POST /auth/logout - Clear session
4. GET /auth/me - Get current user info

## Session Management

Sessions are stored in HTTP-only cookies. The cookie holds an opaque random
token that is looked up in the sessions table on every request.

The OAuth `state` round-trips through a short-lived cookie, so any instance
can finish a login another instance started.
"""

from __future__ import annotations

import logging
import secrets
from urllib.parse import quote

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from farm_time.auth.dependencies import (
    get_current_user_optional,
    get_session_store,
    get_session_token,
)
from farm_time.auth.google import GoogleOAuth, OAuthError, get_google_oauth
from farm_time.auth.identity import resolve_or_create_user
from farm_time.auth.session import SessionStore
from farm_time.config import Settings, get_app_settings
from farm_time.database.connection import get_db_session
from farm_time.database.models import User
from farm_time.errors import InvalidStateError
from farm_time.models.user import AuthStatusResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _error_redirect(error: str) -> RedirectResponse:
    return RedirectResponse(
        url=f"/?error={quote(error)}", status_code=status.HTTP_307_TEMPORARY_REDIRECT
    )


@router.get("/google/login")
async def login(
    oauth: GoogleOAuth = Depends(get_google_oauth),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """Initiate Google OAuth login.

    Redirects the user to Google's consent screen. After consent,
    Google redirects back to /auth/google/callback.
    """
    if not oauth.is_configured:
        return JSONResponse(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            content={"error": "Google OAuth not configured", "code": "not_configured"},
        )

    state = secrets.token_urlsafe(32)
    redirect = RedirectResponse(
        url=oauth.get_authorization_url(state=state),
        status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    )
    redirect.set_cookie(
        key=settings.oauth_state_cookie_name,
        value=state,
        max_age=settings.oauth_state_max_age_seconds,
        path="/",
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
    )

    return redirect


@router.get("/google/callback")
async def google_callback(
    request: Request,
    state: str | None = None,
    code: str | None = None,
    error: str | None = None,
    oauth: GoogleOAuth = Depends(get_google_oauth),
    db: AsyncSession = Depends(get_db_session),
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """Handle Google OAuth callback.

    Checks the state against its cookie, exchanges the authorization code,
    creates or refreshes the user, and sets the session cookie.
    """
    expected_state = request.cookies.get(settings.oauth_state_cookie_name)
    if not expected_state or not state or not secrets.compare_digest(
        expected_state, state
    ):
        logger.warning("OAuth callback with missing or mismatched state")
        invalid = InvalidStateError("Invalid state")
        response: Response = JSONResponse(
            status_code=invalid.status_code, content=invalid.to_dict()
        )
    elif error:
        logger.info(f"Google returned an OAuth error: {error}")
        response = _error_redirect(error)
    elif not code:
        response = _error_redirect("missing_code")
    else:
        response = await _finish_login(code, oauth, db, store, settings)

    # The state is single use whatever the outcome
    response.delete_cookie(
        key=settings.oauth_state_cookie_name,
        path="/",
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
    )
    return response


async def _finish_login(
    code: str,
    oauth: GoogleOAuth,
    db: AsyncSession,
    store: SessionStore,
    settings: Settings,
) -> RedirectResponse:
    try:
        tokens = await oauth.exchange_code(code)
    except OAuthError as e:
        logger.error(f"Token exchange failed: {e}")
        return _error_redirect("token_exchange_failed")

    try:
        user_info = await oauth.get_user_info(tokens.access_token)
    except OAuthError as e:
        logger.error(f"Failed to get user info: {e}")
        return _error_redirect("userinfo_failed")

    user = await resolve_or_create_user(
        db,
        google_id=user_info.id,
        email=user_info.email,
        name=user_info.name or "",
        picture=user_info.picture,
    )
    token = await store.create_session(user.id)

    redirect = RedirectResponse(url="/", status_code=status.HTTP_307_TEMPORARY_REDIRECT)
    redirect.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        path="/",
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
    )

    logger.info(f"User {user.email} logged in")

    return redirect


@router.post("/logout")
async def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    user: User | None = Depends(get_current_user_optional),
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    """Log out the current user.

    Deletes the session and clears the session cookie.
    """
    if user:
        logger.info(f"User {user.email} logged out")

    await store.delete_session(token)

    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
    )

    return {"status": "logged out"}


@router.get("/me", response_model=AuthStatusResponse)
async def get_auth_status(
    user: User | None = Depends(get_current_user_optional),
) -> AuthStatusResponse:
    """Get the current user, or `{"user": null}` when not logged in."""
    if user:
        return AuthStatusResponse(user=UserResponse.model_validate(user))

    return AuthStatusResponse()
