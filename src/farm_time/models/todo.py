"""Todo request and response models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class TodoCreate(BaseModel):
    title: str = ""
    description: str | None = None
    assigned_attendee_id: str | None = None


class TodoUpdate(BaseModel):
    """Update todo request.

    `assigned_attendee_id` set to `null` or `""` unassigns the todo.
    """

    title: str | None = None
    description: str | None = None
    completed: bool | None = None
    assigned_attendee_id: str | None = None


class TodoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    event_id: str
    title: str
    description: str | None
    completed: bool
    assigned_attendee_id: str | None
    assigned_attendee_name: str | None = None
    created_at: datetime
    updated_at: datetime
