"""Google sign-in over the OAuth 2.0 authorization code flow.

Only identity is requested (`openid email profile`); no Google API is
called after login, so access tokens are used once and never stored.

Register `GOOGLE_REDIRECT_URL` as an authorized redirect URI on the OAuth
client in Google Cloud Console and set GOOGLE_CLIENT_ID and
GOOGLE_CLIENT_SECRET.

Every call is a single attempt with a short timeout. Any transport failure,
non-200 answer or incomplete profile becomes an `OAuthError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

import httpx
from fastapi import Request

from farm_time.config import Settings

logger = logging.getLogger(__name__)

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"

DEFAULT_SCOPES = ["openid", "email", "profile"]


class OAuthError(Exception):
    """The provider refused or failed a step of the OAuth flow."""


@dataclass
class GoogleUserInfo:
    """Profile of the signed-in Google account."""

    id: str
    email: str
    name: str | None
    picture: str | None


@dataclass
class GoogleTokens:
    access_token: str
    refresh_token: str | None
    token_type: str
    scope: str


class GoogleOAuth:
    """Google OAuth 2.0 client.

    Example:
        ```python
        oauth = GoogleOAuth.from_settings(settings)
        redirect_to = oauth.get_authorization_url(state=state)

        # on callback
        tokens = await oauth.exchange_code(code)
        profile = await oauth.get_user_info(tokens.access_token)
        ```
    """

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        redirect_uri: str,
        scopes: list[str] | None = None,
        timeout: float = 10.0,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.scopes = scopes or DEFAULT_SCOPES
        self.timeout = timeout

        if not self.is_configured:
            logger.warning(
                "Google sign-in disabled: GOOGLE_CLIENT_ID and "
                "GOOGLE_CLIENT_SECRET are not both set"
            )

    @classmethod
    def from_settings(cls, settings: Settings) -> GoogleOAuth:
        return cls(
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            redirect_uri=settings.google_redirect_url,
            scopes=settings.google_scopes,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def get_authorization_url(self, state: str, access_type: str = "offline") -> str:
        """Build the consent screen URL the browser is redirected to.

        Args:
            state: Value Google echoes back to the callback
            access_type: Passed through to Google
        """
        if not self.is_configured:
            raise RuntimeError("Google OAuth not configured")

        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "response_type": "code",
                "scope": " ".join(self.scopes),
                "state": state,
                "access_type": access_type,
            }
        )
        return f"{GOOGLE_AUTHORIZE_URL}?{query}"

    async def exchange_code(self, code: str) -> GoogleTokens:
        """Trade the callback's authorization code for an access token."""
        if not self.is_configured:
            raise RuntimeError("Google OAuth not configured")

        payload = await self._call(
            "token exchange",
            "POST",
            GOOGLE_TOKEN_URL,
            data={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.redirect_uri,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            },
        )
        if "access_token" not in payload:
            raise OAuthError("token exchange returned no access token")

        return GoogleTokens(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            token_type=payload.get("token_type", "Bearer"),
            scope=payload.get("scope", ""),
        )

    async def get_user_info(self, access_token: str) -> GoogleUserInfo:
        """Fetch the profile behind an access token. Id and email are required."""
        payload = await self._call(
            "userinfo",
            "GET",
            GOOGLE_USERINFO_URL,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        if not payload.get("id") or not payload.get("email"):
            raise OAuthError("userinfo response missing id or email")

        return GoogleUserInfo(
            id=payload["id"],
            email=payload["email"],
            name=payload.get("name"),
            picture=payload.get("picture"),
        )

    async def _call(self, step: str, method: str, url: str, **kwargs: Any) -> dict:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise OAuthError(f"{step} request failed: {e}") from e

        if response.status_code != httpx.codes.OK:
            logger.error(f"Google {step} failed ({response.status_code}): {response.text}")
            raise OAuthError(f"{step} failed with status {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise OAuthError(f"{step} returned invalid JSON") from e


def get_google_oauth(request: Request) -> GoogleOAuth:
    """FastAPI dependency returning the client `create_app` built."""
    return request.app.state.google_oauth
