"""Database models for event planning.

## Schema Overview

```
users
└── sessions (1:N)

events
├── attendees (1:N)
├── meals (1:N)
│   └── meal_items (1:N)
│       └── meal_signups (1:N) - unique per (meal_item, user)
└── todos (1:N)
```

Children are removed by the database (`ON DELETE CASCADE`), so relationships
are declared with `passive_deletes=True` and the ORM never loads a subtree
just to delete it. Attendee references from meal items and todos are
`ON DELETE SET NULL`.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from enum import Enum

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all database models."""


class AttendeeStatus(str, Enum):
    """Whether an attendee is coming."""

    ATTENDING = "attending"
    MAYBE = "maybe"
    DECLINED = "declined"


class MealType(str, Enum):
    """Kind of eating occasion."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACKS = "snacks"
    OTHER = "other"


class User(Base):
    """User account model.

    Users are created via Google OAuth. The google_id is the identifier from
    Google, while we maintain our own id for internal use.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    google_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    picture: Mapped[str | None] = mapped_column(String(512))

    # Permissions
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_create_events: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    # Relationships
    sessions: Mapped[list["Session"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"


class Session(Base):
    """Login session keyed by an opaque token.

    The token is the primary key; it is never derived from user data.
    """

    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    user: Mapped["User"] = relationship(back_populates="sessions")

    __table_args__ = (
        Index("ix_sessions_user_id", "user_id"),
        Index("ix_sessions_expires_at", "expires_at"),
    )

    def __repr__(self) -> str:
        return f"<Session user_id={self.user_id} expires_at={self.expires_at}>"


class Event(Base):
    """A planned gathering with a time range."""

    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    location: Mapped[str | None] = mapped_column(String(512))
    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    attendees: Mapped[list["Attendee"]] = relationship(
        back_populates="event", cascade="all, delete-orphan", passive_deletes=True
    )
    meals: Mapped[list["Meal"]] = relationship(
        back_populates="event", cascade="all, delete-orphan", passive_deletes=True
    )
    todos: Mapped[list["Todo"]] = relationship(
        back_populates="event", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (Index("ix_events_start_time", "start_time"),)

    def __repr__(self) -> str:
        return f"<Event {self.title[:30]}>"


class Attendee(Base):
    """A person invited to an event."""

    __tablename__ = "attendees"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    event_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=AttendeeStatus.ATTENDING.value
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    event: Mapped["Event"] = relationship(back_populates="attendees")

    __table_args__ = (Index("ix_attendees_event_id", "event_id"),)

    def __repr__(self) -> str:
        return f"<Attendee {self.email}>"


class Meal(Base):
    """A named eating occasion within an event (e.g. "Saturday Dinner")."""

    __tablename__ = "meals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    event_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    meal_type: Mapped[str] = mapped_column(String(16), nullable=False)
    meal_date: Mapped[date | None] = mapped_column(Date)
    notes: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    event: Mapped["Event"] = relationship(back_populates="meals")
    items: Mapped[list["MealItem"]] = relationship(
        back_populates="meal", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (Index("ix_meals_event_id", "event_id"),)

    def __repr__(self) -> str:
        return f"<Meal {self.name}>"


class MealItem(Base):
    """Something needed for a meal (e.g. "Burgers")."""

    __tablename__ = "meal_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    meal_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("meals.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    assigned_attendee_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("attendees.id", ondelete="SET NULL")
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    meal: Mapped["Meal"] = relationship(back_populates="items")
    signups: Mapped[list["MealSignup"]] = relationship(
        back_populates="meal_item", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (Index("ix_meal_items_meal_id", "meal_id"),)

    def __repr__(self) -> str:
        return f"<MealItem {self.name}>"


class MealSignup(Base):
    """A user's commitment to bring a meal item.

    Name and email are copied from the user at signup time.
    """

    __tablename__ = "meal_signups"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    meal_item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("meal_items.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    user_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    user_email: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    meal_item: Mapped["MealItem"] = relationship(back_populates="signups")

    __table_args__ = (
        UniqueConstraint("meal_item_id", "user_id", name="uq_meal_signup_item_user"),
        Index("ix_meal_signups_item", "meal_item_id"),
        Index("ix_meal_signups_user", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<MealSignup item={self.meal_item_id} user={self.user_id}>"


class Todo(Base):
    """A task to get done before or during an event."""

    __tablename__ = "todos"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    event_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    assigned_attendee_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("attendees.id", ondelete="SET NULL")
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )

    event: Mapped["Event"] = relationship(back_populates="todos")

    __table_args__ = (Index("ix_todos_event_id", "event_id"),)

    def __repr__(self) -> str:
        return f"<Todo {self.title[:30]}>"
