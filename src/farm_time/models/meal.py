"""Meal, meal item and signup request and response models."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class MealCreate(BaseModel):
    """Create meal request.

    meal_type is one of breakfast, lunch, dinner, snacks or other.
    """

    name: str = ""
    meal_type: str = ""
    meal_date: date | None = None
    notes: str | None = None


class MealUpdate(BaseModel):
    """Update meal request. `meal_date: null` removes the date."""

    name: str | None = None
    meal_type: str | None = None
    meal_date: date | None = None
    notes: str | None = None


class MealResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    event_id: str
    name: str
    meal_type: str
    meal_date: date | None
    notes: str | None
    created_at: datetime
    updated_at: datetime


class MealItemCreate(BaseModel):
    name: str = ""
    description: str | None = None
    assigned_attendee_id: str | None = None


class MealItemUpdate(BaseModel):
    """Update meal item request.

    `assigned_attendee_id` set to `null` or `""` unassigns the item.
    """

    name: str | None = None
    description: str | None = None
    assigned_attendee_id: str | None = None


class MealItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    meal_id: str
    name: str
    description: str | None
    assigned_attendee_id: str | None
    assigned_attendee_name: str | None = None
    created_at: datetime
    updated_at: datetime


class MealSignupCreate(BaseModel):
    notes: str | None = None


class MealSignupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    meal_item_id: str
    user_id: str
    user_name: str
    user_email: str
    notes: str | None
    created_at: datetime


class MealItemWithSignups(MealItemResponse):
    signups: list[MealSignupResponse] = Field(default_factory=list)


class MealWithItems(MealResponse):
    items: list[MealItemWithSignups] = Field(default_factory=list)
