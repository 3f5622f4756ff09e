"""Event service.

Creating an event also creates its placeholder lunches and dinners (see
`farm_time.planning.meal_generator`). Deleting an event removes everything
under it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from farm_time.database.models import Event
from farm_time.errors import ValidationError
from farm_time.models.event import (
    EventCreate,
    EventResponse,
    EventUpdate,
    EventWithAll,
    EventWithAttendees,
    EventWithMeals,
)
from farm_time.planning.attendees import AttendeeService
from farm_time.planning.common import ensure_event, require_text
from farm_time.planning.meal_generator import generate_meals
from farm_time.planning.meals import MealService
from farm_time.planning.todos import TodoService

logger = logging.getLogger(__name__)


def _require_time(value: datetime | None, label: str) -> datetime:
    if value is None:
        raise ValidationError(f"{label} is required")
    return value


class EventService:
    """Events and their composite views."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_events(self) -> list[EventResponse]:
        """List all events ordered by start time."""
        result = await self.db.execute(
            select(Event)
            .order_by(Event.start_time)
            .execution_options(populate_existing=True)
        )
        return [EventResponse.model_validate(e) for e in result.scalars().all()]

    async def get_event(self, event_id: str) -> EventResponse:
        return EventResponse.model_validate(await ensure_event(self.db, event_id))

    async def create_event(
        self, data: EventCreate, tz: tzinfo | None = None
    ) -> EventResponse:
        """Create an event and its placeholder meals.

        Args:
            data: Title, start and end time are required
            tz: Time zone that decides meal dates; defaults to the offsets
                of the given times

        Raises:
            ValidationError: If a required field is missing
        """
        title = require_text(data.title, "Title")
        start = _require_time(data.start_time, "Start time")
        end = _require_time(data.end_time, "End time")

        now = datetime.now(timezone.utc)
        event = Event(
            title=title,
            description=data.description,
            location=data.location,
            start_time=start,
            end_time=end,
            created_at=now,
            updated_at=now,
        )
        self.db.add(event)
        await self.db.commit()

        response = EventResponse.model_validate(event)
        logger.info(f"Created event {event.id} '{title}'")

        await generate_meals(self.db, response.id, start, end, tz)

        return response

    async def update_event(self, event_id: str, data: EventUpdate) -> EventResponse:
        """Apply the fields present in `data`. Meals are not regenerated."""
        event = await ensure_event(self.db, event_id)
        changes = data.model_dump(exclude_unset=True)

        if "title" in changes:
            event.title = require_text(changes["title"], "Title")
        if "description" in changes:
            event.description = changes["description"]
        if "location" in changes:
            event.location = changes["location"]
        if "start_time" in changes:
            event.start_time = _require_time(changes["start_time"], "Start time")
        if "end_time" in changes:
            event.end_time = _require_time(changes["end_time"], "End time")
        event.updated_at = datetime.now(timezone.utc)

        await self.db.commit()
        return EventResponse.model_validate(event)

    async def delete_event(self, event_id: str) -> None:
        """Delete an event with its attendees, meals, items, signups and todos."""
        await ensure_event(self.db, event_id)
        await self.db.execute(delete(Event).where(Event.id == event_id))
        await self.db.commit()
        logger.info(f"Deleted event {event_id}")

    # Composite reads. Each level is a separate query.

    async def get_event_with_attendees(self, event_id: str) -> EventWithAttendees:
        event = await self.get_event(event_id)
        attendees = await AttendeeService(self.db).list_attendees(event_id)
        return EventWithAttendees(**event.model_dump(), attendees=attendees)

    async def get_event_with_meals(self, event_id: str) -> EventWithMeals:
        event = await self.get_event_with_attendees(event_id)
        meals = await MealService(self.db).meals_with_items(event_id)
        return EventWithMeals(**event.model_dump(), meals=meals)

    async def get_event_with_all(self, event_id: str) -> EventWithAll:
        event = await self.get_event_with_meals(event_id)
        todos = await TodoService(self.db).todos_for_event(event_id)
        return EventWithAll(**event.model_dump(), todos=todos)
