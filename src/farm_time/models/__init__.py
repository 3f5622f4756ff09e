"""Request and response models for the event planning API."""

from farm_time.models.attendee import AttendeeCreate, AttendeeResponse, AttendeeUpdate
from farm_time.models.event import (
    EventCreate,
    EventResponse,
    EventUpdate,
    EventWithAll,
    EventWithAttendees,
    EventWithMeals,
)
from farm_time.models.meal import (
    MealCreate,
    MealItemCreate,
    MealItemResponse,
    MealItemUpdate,
    MealItemWithSignups,
    MealResponse,
    MealSignupCreate,
    MealSignupResponse,
    MealUpdate,
    MealWithItems,
)
from farm_time.models.todo import TodoCreate, TodoResponse, TodoUpdate
from farm_time.models.user import (
    AuthStatusResponse,
    UserPermissionsUpdate,
    UserResponse,
)

__all__ = [
    # Event
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "EventWithAttendees",
    "EventWithMeals",
    "EventWithAll",
    # Attendee
    "AttendeeCreate",
    "AttendeeUpdate",
    "AttendeeResponse",
    # Meal
    "MealCreate",
    "MealUpdate",
    "MealResponse",
    "MealWithItems",
    "MealItemCreate",
    "MealItemUpdate",
    "MealItemResponse",
    "MealItemWithSignups",
    "MealSignupCreate",
    "MealSignupResponse",
    # Todo
    "TodoCreate",
    "TodoUpdate",
    "TodoResponse",
    # User
    "UserResponse",
    "AuthStatusResponse",
    "UserPermissionsUpdate",
]
