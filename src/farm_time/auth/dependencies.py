"""FastAPI dependencies for authentication.

These dependencies resolve the session cookie to a user and hand that user
to the route handler as an ordinary parameter.

## Usage

```python
from fastapi import Depends
from farm_time.auth import get_current_user, require_admin
from farm_time.database import User

@router.get("/events")
async def list_events(user: User = Depends(get_current_user)):
    ...

@router.get("/admin/users")
async def list_users(admin: User = Depends(require_admin)):
    # Only admins can access this
    ...
```
"""

from __future__ import annotations

import logging

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from farm_time.auth.session import SessionStore
from farm_time.config import Settings, get_app_settings
from farm_time.database.connection import get_db_session
from farm_time.database.models import User
from farm_time.errors import ForbiddenError, UnauthenticatedError

logger = logging.getLogger(__name__)


def get_session_store(
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> SessionStore:
    return SessionStore(db, ttl=settings.session_ttl)


def get_session_token(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> str | None:
    """Read the session token from its cookie."""
    return request.cookies.get(settings.session_cookie_name)


async def get_current_user_optional(
    token: str | None = Depends(get_session_token),
    store: SessionStore = Depends(get_session_store),
) -> User | None:
    """Get the current user if logged in, or None.

    Use this for routes that work with or without authentication.
    """
    if not token:
        return None

    try:
        return await store.resolve_session(token)
    except UnauthenticatedError:
        return None


async def get_current_user(
    token: str | None = Depends(get_session_token),
    store: SessionStore = Depends(get_session_store),
) -> User:
    """Get the current authenticated user.

    Raises UnauthenticatedError (401) if there is no valid session.
    """
    return await store.resolve_session(token)


async def require_admin(
    user: User = Depends(get_current_user),
) -> User:
    """Require the current user to be an admin.

    Raises ForbiddenError (403) if not an admin.
    """
    if not user.is_admin:
        logger.warning(f"Non-admin {user.email} denied admin access")
        raise ForbiddenError("Admin access required")

    return user
