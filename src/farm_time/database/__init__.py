"""Database module for event planning.

This module provides:
- SQLAlchemy async database connection
- User, session, event, attendee, meal and todo models
"""

from farm_time.database.connection import (
    close_db,
    create_tables,
    get_db,
    get_db_session,
    init_db,
)
from farm_time.database.models import (
    Attendee,
    AttendeeStatus,
    Base,
    Event,
    Meal,
    MealItem,
    MealSignup,
    MealType,
    Session,
    Todo,
    User,
)

__all__ = [
    # Connection
    "get_db",
    "get_db_session",
    "init_db",
    "close_db",
    "create_tables",
    # Models
    "Base",
    "User",
    "Session",
    "Event",
    "Attendee",
    "AttendeeStatus",
    "Meal",
    "MealType",
    "MealItem",
    "MealSignup",
    "Todo",
]
