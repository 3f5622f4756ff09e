"""Authentication module for event planning.

Provides Google OAuth sign-in and database-backed sessions.

## OAuth Flow

1. User clicks "Login with Google"
2. A random state is stored in a short-lived cookie and the user is
   redirected to the Google consent screen
3. Google redirects back with the state and an authorization code
4. The state is checked against the cookie
5. The code is exchanged for an access token and the profile is fetched
6. The local user is created or refreshed
7. A session row is created and its token set as a cookie

## Scopes

- openid: For authentication
- email: To identify the user
- profile: For display name and picture

## Security

- Session tokens are random and only meaningful to our database
- Sessions expire after a fixed TTL (default: 7 days)
- HTTPS (Secure cookies) in production
"""

from farm_time.auth.dependencies import (
    get_current_user,
    get_current_user_optional,
    require_admin,
)
from farm_time.auth.google import GoogleOAuth, OAuthError, get_google_oauth
from farm_time.auth.identity import resolve_or_create_user
from farm_time.auth.session import SessionStore, generate_token

__all__ = [
    "GoogleOAuth",
    "OAuthError",
    "get_google_oauth",
    "SessionStore",
    "generate_token",
    "resolve_or_create_user",
    "get_current_user",
    "get_current_user_optional",
    "require_admin",
]
