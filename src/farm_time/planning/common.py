"""Helpers shared by the planning services."""

from __future__ import annotations

from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farm_time.database.models import Attendee, Base, Event
from farm_time.errors import NotFoundError, ValidationError

ModelT = TypeVar("ModelT", bound=Base)


async def get_or_404(
    db: AsyncSession,
    model: type[ModelT],
    row_id: str,
    label: str,
    **parent: Any,
) -> ModelT:
    """Fetch a row by id, optionally checking its parent foreign key.

    `parent` maps a column name to the expected value, e.g.
    `event_id=event_id`. A row that exists under another parent is treated
    as missing.

    Raises:
        NotFoundError: If there is no such row under the given parent
    """
    # Rows removed or nulled by a database cascade can linger in the identity
    # map, so always read through to the database.
    row = await db.scalar(
        select(model)
        .where(model.id == row_id)
        .execution_options(populate_existing=True)
    )
    if row is None:
        raise NotFoundError(f"{label} not found")

    for column, expected in parent.items():
        if getattr(row, column) != expected:
            raise NotFoundError(f"{label} not found")

    return row


async def ensure_event(db: AsyncSession, event_id: str) -> Event:
    return await get_or_404(db, Event, event_id, "Event")


def require_text(value: str | None, label: str) -> str:
    """Return a stripped, non-empty string or raise ValidationError."""
    if value is None or not value.strip():
        raise ValidationError(f"{label} is required")
    return value.strip()


def blank_to_none(value: str | None) -> str | None:
    if value is None or value == "":
        return None
    return value


async def resolve_assignee(
    db: AsyncSession,
    event_id: str,
    attendee_id: str | None,
) -> Attendee | None:
    """Check that an attendee being assigned belongs to the event.

    `None` and `""` mean unassigned.
    """
    attendee_id = blank_to_none(attendee_id)
    if attendee_id is None:
        return None
    return await get_or_404(
        db, Attendee, attendee_id, "Assigned attendee", event_id=event_id
    )
