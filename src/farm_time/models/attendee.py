"""Attendee request and response models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AttendeeCreate(BaseModel):
    """Add attendee request. Status defaults to "attending"."""

    name: str = ""
    email: str = ""
    status: str | None = None


class AttendeeUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    status: str | None = None


class AttendeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    event_id: str
    name: str
    email: str
    status: str
    created_at: datetime
    updated_at: datetime
