"""Event request and response models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from farm_time.models.attendee import AttendeeResponse
from farm_time.models.meal import MealWithItems
from farm_time.models.todo import TodoResponse


class EventCreate(BaseModel):
    """Create event request.

    Title and both times are required; they are checked by the service so the
    client gets a 400 with a readable message rather than a schema error.
    """

    title: str = ""
    description: str | None = None
    location: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None


class EventUpdate(BaseModel):
    """Update event request.

    Only fields present in the body are applied. Sending `null` clears
    description or location; title and times cannot be cleared.
    """

    title: str | None = None
    description: str | None = None
    location: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None


class EventResponse(BaseModel):
    """Event without children."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str | None
    location: str | None
    start_time: datetime
    end_time: datetime
    created_at: datetime
    updated_at: datetime


class EventWithAttendees(EventResponse):
    attendees: list[AttendeeResponse] = Field(default_factory=list)


class EventWithMeals(EventWithAttendees):
    meals: list[MealWithItems] = Field(default_factory=list)


class EventWithAll(EventWithMeals):
    """Event with attendees, meals (with items and signups) and todos."""

    todos: list[TodoResponse] = Field(default_factory=list)
