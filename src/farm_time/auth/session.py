"""Database-backed login sessions.

A session is a row in the `sessions` table keyed by an opaque token. The
token is the only thing the browser holds (in an HTTP-only cookie); it
carries no user data and cannot be verified without the database.

## Lifecycle

- Created on successful OAuth login with `expires_at = now + ttl`
- Resolved on every protected request
- Deleted on logout, or on the first lookup after it has expired
- Never extended: the TTL is fixed when the session is created

## Security

- Tokens come from `secrets.token_urlsafe(32)` (256 bits of entropy)
- Cookies are HTTP-only, SameSite=Lax, and Secure in production
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from farm_time.database.models import Session, User
from farm_time.errors import UnauthenticatedError

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32
DEFAULT_TTL = timedelta(days=7)


def generate_token() -> str:
    """Generate a URL-safe random token."""
    return secrets.token_urlsafe(TOKEN_BYTES)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SessionStore:
    """Create, resolve and revoke login sessions.

    Example:
        ```python
        store = SessionStore(db, ttl=settings.session_ttl)

        token = await store.create_session(user.id)
        user = await store.resolve_session(token)
        await store.delete_session(token)
        ```
    """

    def __init__(self, db: AsyncSession, ttl: timedelta = DEFAULT_TTL):
        self.db = db
        self.ttl = ttl

    async def create_session(self, user_id: str) -> str:
        """Persist a new session for a user and return its token."""
        now = datetime.now(timezone.utc)
        token = generate_token()

        self.db.add(
            Session(
                id=token,
                user_id=user_id,
                expires_at=now + self.ttl,
                created_at=now,
            )
        )
        await self.db.commit()

        logger.debug(f"Created session for user {user_id}")
        return token

    async def resolve_session(self, token: str | None) -> User:
        """Resolve a session token to its user.

        Raises:
            UnauthenticatedError: If the token is missing, unknown, expired
                or belongs to a user that no longer exists. An expired
                session is deleted before the error is raised.
        """
        if not token:
            raise UnauthenticatedError()

        session = await self.db.get(Session, token)
        if session is None:
            raise UnauthenticatedError()

        if _as_utc(session.expires_at) <= datetime.now(timezone.utc):
            logger.info(f"Session for user {session.user_id} expired")
            await self.db.delete(session)
            await self.db.commit()
            raise UnauthenticatedError("Session expired")

        user = await self.db.get(User, session.user_id)
        if user is None:
            logger.warning(f"Session for non-existent user: {session.user_id}")
            raise UnauthenticatedError()

        return user

    async def delete_session(self, token: str | None) -> None:
        """Delete a session. Unknown tokens are ignored."""
        if not token:
            return

        await self.db.execute(delete(Session).where(Session.id == token))
        await self.db.commit()

    async def delete_user_sessions(self, user_id: str) -> int:
        """Revoke every session belonging to a user."""
        result = await self.db.execute(
            delete(Session).where(Session.user_id == user_id)
        )
        await self.db.commit()
        return result.rowcount or 0

    async def purge_expired(self) -> int:
        """Delete all sessions that have already expired.

        Expired sessions are rejected on lookup regardless; this only keeps
        the table small.
        """
        result = await self.db.execute(
            delete(Session)
            .where(Session.expires_at <= datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        purged = result.rowcount or 0
        logger.info(f"Purged {purged} expired sessions")
        return purged

