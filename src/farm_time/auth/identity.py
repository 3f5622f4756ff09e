"""Local user records for Google identities."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from farm_time.database.models import User
from farm_time.errors import StorageError

logger = logging.getLogger(__name__)


async def resolve_or_create_user(
    db: AsyncSession,
    google_id: str,
    email: str,
    name: str | None,
    picture: str | None,
) -> User:
    """Find the user for a Google identity, creating it on first login.

    Existing users get their email, name and picture refreshed from the
    provider; permission flags are left alone. The very first user in the
    database is made an admin who can create events.

    Raises:
        StorageError: If the database cannot be read or written.
    """
    now = datetime.now(timezone.utc)

    try:
        result = await db.execute(select(User).where(User.google_id == google_id))
        user = result.scalar_one_or_none()

        if user:
            user.email = email
            user.name = name or ""
            user.picture = picture
            user.updated_at = now
        else:
            user_count = await db.scalar(select(func.count()).select_from(User))
            is_first = not user_count

            user = User(
                google_id=google_id,
                email=email,
                name=name or "",
                picture=picture,
                is_admin=is_first,
                can_create_events=is_first,
                created_at=now,
                updated_at=now,
            )
            db.add(user)

            if is_first:
                logger.info(f"First user {email} granted admin")

        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to save user {email}: {e}")
        raise StorageError("Failed to save user") from e

    return user
