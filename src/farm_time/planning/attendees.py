"""Attendee service."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from farm_time.database.models import Attendee, AttendeeStatus
from farm_time.errors import ValidationError
from farm_time.models.attendee import AttendeeCreate, AttendeeResponse, AttendeeUpdate
from farm_time.planning.common import ensure_event, get_or_404, require_text

logger = logging.getLogger(__name__)

VALID_STATUSES = {s.value for s in AttendeeStatus}


def _check_status(status: str | None) -> str:
    if not status:
        return AttendeeStatus.ATTENDING.value
    if status not in VALID_STATUSES:
        raise ValidationError(
            f"Invalid status '{status}'. Expected one of: "
            + ", ".join(sorted(VALID_STATUSES))
        )
    return status


class AttendeeService:
    """Attendees of an event."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_attendees(self, event_id: str) -> list[AttendeeResponse]:
        """List an event's attendees ordered by name."""
        await ensure_event(self.db, event_id)
        return [
            AttendeeResponse.model_validate(a)
            for a in await self._attendee_rows(event_id)
        ]

    async def _attendee_rows(self, event_id: str) -> list[Attendee]:
        result = await self.db.execute(
            select(Attendee)
            .where(Attendee.event_id == event_id)
            .order_by(Attendee.name)
        )
        return list(result.scalars().all())

    async def get_attendee(self, event_id: str, attendee_id: str) -> AttendeeResponse:
        attendee = await get_or_404(
            self.db, Attendee, attendee_id, "Attendee", event_id=event_id
        )
        return AttendeeResponse.model_validate(attendee)

    async def create_attendee(
        self, event_id: str, data: AttendeeCreate
    ) -> AttendeeResponse:
        """Add an attendee. Name and email are required."""
        name = require_text(data.name, "Name")
        email = require_text(data.email, "Email")
        status = _check_status(data.status)
        await ensure_event(self.db, event_id)

        now = datetime.now(timezone.utc)
        attendee = Attendee(
            event_id=event_id,
            name=name,
            email=email,
            status=status,
            created_at=now,
            updated_at=now,
        )
        self.db.add(attendee)
        await self.db.commit()

        return AttendeeResponse.model_validate(attendee)

    async def update_attendee(
        self, event_id: str, attendee_id: str, data: AttendeeUpdate
    ) -> AttendeeResponse:
        attendee = await get_or_404(
            self.db, Attendee, attendee_id, "Attendee", event_id=event_id
        )
        changes = data.model_dump(exclude_unset=True)

        if "name" in changes:
            attendee.name = require_text(changes["name"], "Name")
        if "email" in changes:
            attendee.email = require_text(changes["email"], "Email")
        if changes.get("status") is not None:
            attendee.status = _check_status(changes["status"])
        attendee.updated_at = datetime.now(timezone.utc)

        await self.db.commit()
        return AttendeeResponse.model_validate(attendee)

    async def delete_attendee(self, event_id: str, attendee_id: str) -> None:
        """Remove an attendee. Items and todos assigned to them are unassigned."""
        await get_or_404(self.db, Attendee, attendee_id, "Attendee", event_id=event_id)
        await self.db.execute(delete(Attendee).where(Attendee.id == attendee_id))
        await self.db.commit()

    async def ensure_attendee(
        self, event_id: str, name: str, email: str
    ) -> Attendee | None:
        """Enroll someone as attending unless an attendee has their email.

        Returns:
            The new attendee, or None if they were already enrolled
        """
        result = await self.db.execute(
            select(Attendee.id).where(
                Attendee.event_id == event_id,
                Attendee.email == email,
            )
        )
        if result.first() is not None:
            return None

        now = datetime.now(timezone.utc)
        attendee = Attendee(
            event_id=event_id,
            name=name or email,
            email=email,
            status=AttendeeStatus.ATTENDING.value,
            created_at=now,
            updated_at=now,
        )
        self.db.add(attendee)
        await self.db.commit()

        logger.info(f"Enrolled {email} as attendee of event {event_id}")
        return attendee
