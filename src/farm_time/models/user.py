"""User response and permission models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    """User information. The Google id is never exposed."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    picture: str | None
    is_admin: bool
    can_create_events: bool
    created_at: datetime
    updated_at: datetime


class AuthStatusResponse(BaseModel):
    """Who am I: `user` is null when not logged in."""

    user: UserResponse | None = None


class UserPermissionsUpdate(BaseModel):
    """Admin request to change a user's permission flags."""

    can_create_events: bool | None = None
    is_admin: bool | None = None
