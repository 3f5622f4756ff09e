"""Tests for the Google login flow and the auth gate."""

from unittest.mock import AsyncMock
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from farm_time.api import create_app
from farm_time.auth.google import (
    GOOGLE_AUTHORIZE_URL,
    GoogleOAuth,
    GoogleTokens,
    GoogleUserInfo,
    OAuthError,
    get_google_oauth,
)


@pytest.fixture
def google_profile(google_oauth: GoogleOAuth) -> GoogleOAuth:
    """Google accepts the code and returns a profile."""
    google_oauth.exchange_code = AsyncMock(
        return_value=GoogleTokens(
            access_token="access-token",
            refresh_token=None,
            token_type="Bearer",
            scope="openid email profile",
        )
    )
    google_oauth.get_user_info = AsyncMock(
        return_value=GoogleUserInfo(
            id="google-123",
            email="farmer@example.com",
            name="Fran Farmer",
            picture="https://example.com/fran.png",
        )
    )
    return google_oauth


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestLogin:
    async def test_redirects_to_google_with_state_cookie(self, client):
        response = await client.get("/auth/google/login")

        assert response.status_code == 307
        location = response.headers["location"]
        assert location.startswith(GOOGLE_AUTHORIZE_URL)

        params = parse_qs(urlparse(location).query)
        assert params["access_type"] == ["offline"]
        assert params["scope"] == ["openid email profile"]
        assert params["state"] == [response.cookies["oauth_state"]]

        set_cookie = response.headers["set-cookie"].lower()
        assert "httponly" in set_cookie
        assert "max-age=300" in set_cookie

    async def test_not_configured(self, app, client):
        app.dependency_overrides[get_google_oauth] = lambda: GoogleOAuth(
            None, None, "http://testserver/auth/google/callback"
        )

        response = await client.get("/auth/google/login")
        assert response.status_code == 501

    async def test_uses_settings_given_to_app(self, settings):
        app = create_app(
            settings.model_copy(
                update={
                    "google_client_id": "explicit-client",
                    "oauth_state_cookie_name": "login_state",
                }
            )
        )

        async with httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://testserver"
        ) as client:
            response = await client.get("/auth/google/login")

        assert response.status_code == 307
        params = parse_qs(urlparse(response.headers["location"]).query)
        assert params["client_id"] == ["explicit-client"]
        assert params["state"] == [response.cookies["login_state"]]


class TestCallback:
    async def test_success_sets_session_cookie(self, client, google_profile):
        client.cookies.set("oauth_state", "state-abc")

        response = await client.get(
            "/auth/google/callback", params={"state": "state-abc", "code": "code-1"}
        )

        assert response.status_code == 307
        assert response.headers["location"] == "/"
        assert response.cookies.get("farm_session")
        google_profile.exchange_code.assert_awaited_once_with("code-1")
        google_profile.get_user_info.assert_awaited_once_with("access-token")

        me = await client.get("/auth/me")
        user = me.json()["user"]
        assert user["email"] == "farmer@example.com"
        assert user["name"] == "Fran Farmer"
        assert user["is_admin"] is True
        assert "google_id" not in user

    async def test_missing_state_cookie(self, client, google_profile):
        response = await client.get(
            "/auth/google/callback", params={"state": "state-abc", "code": "code-1"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid state", "code": "invalid_state"}
        google_profile.exchange_code.assert_not_awaited()

    async def test_mismatched_state(self, client, google_profile):
        client.cookies.set("oauth_state", "state-abc")

        response = await client.get(
            "/auth/google/callback", params={"state": "state-xyz", "code": "code-1"}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_state"

        set_cookie = response.headers["set-cookie"].lower()
        assert set_cookie.startswith("oauth_state=")
        assert "max-age=0" in set_cookie
        google_profile.exchange_code.assert_not_awaited()

    async def test_provider_error_redirects(self, client, google_profile):
        client.cookies.set("oauth_state", "state-abc")

        response = await client.get(
            "/auth/google/callback",
            params={"state": "state-abc", "error": "access_denied"},
        )

        assert response.status_code == 307
        assert response.headers["location"] == "/?error=access_denied"
        google_profile.exchange_code.assert_not_awaited()

    async def test_token_exchange_failure_redirects(self, client, google_profile):
        google_profile.exchange_code = AsyncMock(side_effect=OAuthError("denied"))
        client.cookies.set("oauth_state", "state-abc")

        response = await client.get(
            "/auth/google/callback", params={"state": "state-abc", "code": "bad"}
        )

        assert response.status_code == 307
        assert response.headers["location"] == "/?error=token_exchange_failed"
        assert "farm_session" not in response.cookies

    async def test_userinfo_failure_redirects(self, client, google_profile):
        google_profile.get_user_info = AsyncMock(side_effect=OAuthError("nope"))
        client.cookies.set("oauth_state", "state-abc")

        response = await client.get(
            "/auth/google/callback", params={"state": "state-abc", "code": "code-1"}
        )

        assert response.status_code == 307
        assert response.headers["location"] == "/?error=userinfo_failed"


class TestSession:
    async def test_me_anonymous(self, client):
        response = await client.get("/auth/me")
        assert response.status_code == 200
        assert response.json() == {"user": None}

    async def test_api_requires_login(self, client):
        response = await client.get("/api/events")
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized", "code": "unauthenticated"}

    async def test_bogus_cookie_rejected(self, client):
        client.cookies.set("farm_session", "made-up")
        response = await client.get("/api/events")
        assert response.status_code == 401

    async def test_logout_ends_session(self, admin_client):
        assert (await admin_client.get("/api/events")).status_code == 200

        response = await admin_client.post("/auth/logout")
        assert response.status_code == 200
        assert response.json() == {"status": "logged out"}

        assert (await admin_client.get("/api/events")).status_code == 401
        assert (await admin_client.get("/auth/me")).json() == {"user": None}

    async def test_logout_without_session(self, client):
        response = await client.post("/auth/logout")
        assert response.status_code == 200
