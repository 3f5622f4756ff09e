"""Meal, meal item and signup service.

## Composite Reads

`MealWithItems` is assembled from one query per level (meals, then items,
then signups per item). The queries are not wrapped in a snapshot, so a
concurrent write can show up in one level and not another.

## Signups

A user can sign up for a given item once. Signing up also enrolls the user
as an attendee of the event, matched by email.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from farm_time.database.models import (
    Attendee,
    Meal,
    MealItem,
    MealSignup,
    MealType,
    User,
)
from farm_time.errors import ConflictError, NotFoundError, ValidationError
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
from farm_time.planning.attendees import AttendeeService
from farm_time.planning.common import (
    blank_to_none,
    ensure_event,
    get_or_404,
    require_text,
    resolve_assignee,
)

logger = logging.getLogger(__name__)

VALID_MEAL_TYPES = {t.value for t in MealType}


def _check_meal_type(meal_type: str | None) -> str:
    meal_type = require_text(meal_type, "Meal type")
    if meal_type not in VALID_MEAL_TYPES:
        raise ValidationError(
            f"Invalid meal type '{meal_type}'. Expected one of: "
            + ", ".join(sorted(VALID_MEAL_TYPES))
        )
    return meal_type


def _item_response(item: MealItem, attendee_name: str | None) -> MealItemResponse:
    response = MealItemResponse.model_validate(item)
    response.assigned_attendee_name = attendee_name
    return response


class MealService:
    """Meals of an event, their items, and who is bringing what."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # Meals

    async def list_meals(self, event_id: str) -> list[MealWithItems]:
        """List an event's meals with items and signups.

        Ordered by date (undated meals last), then creation time.
        """
        await ensure_event(self.db, event_id)
        return await self.meals_with_items(event_id)

    async def meals_with_items(self, event_id: str) -> list[MealWithItems]:
        result = await self.db.execute(
            select(Meal)
            .where(Meal.event_id == event_id)
            .order_by(Meal.meal_date.is_(None), Meal.meal_date, Meal.created_at)
            .execution_options(populate_existing=True)
        )
        return [await self._with_items(meal) for meal in result.scalars().all()]

    async def get_meal(self, event_id: str, meal_id: str) -> MealWithItems:
        meal = await get_or_404(self.db, Meal, meal_id, "Meal", event_id=event_id)
        return await self._with_items(meal)

    async def create_meal(self, event_id: str, data: MealCreate) -> MealResponse:
        """Create a meal. Name and meal type are required."""
        name = require_text(data.name, "Name")
        meal_type = _check_meal_type(data.meal_type)
        await ensure_event(self.db, event_id)

        now = datetime.now(timezone.utc)
        meal = Meal(
            event_id=event_id,
            name=name,
            meal_type=meal_type,
            meal_date=data.meal_date,
            notes=data.notes,
            created_at=now,
            updated_at=now,
        )
        self.db.add(meal)
        await self.db.commit()

        return MealResponse.model_validate(meal)

    async def update_meal(
        self, event_id: str, meal_id: str, data: MealUpdate
    ) -> MealResponse:
        meal = await get_or_404(self.db, Meal, meal_id, "Meal", event_id=event_id)
        changes = data.model_dump(exclude_unset=True)

        if "name" in changes:
            meal.name = require_text(changes["name"], "Name")
        if "meal_type" in changes:
            meal.meal_type = _check_meal_type(changes["meal_type"])
        if "meal_date" in changes:
            meal.meal_date = changes["meal_date"]
        if "notes" in changes:
            meal.notes = changes["notes"]
        meal.updated_at = datetime.now(timezone.utc)

        await self.db.commit()
        return MealResponse.model_validate(meal)

    async def delete_meal(self, event_id: str, meal_id: str) -> None:
        """Delete a meal with its items and signups."""
        await get_or_404(self.db, Meal, meal_id, "Meal", event_id=event_id)
        await self.db.execute(delete(Meal).where(Meal.id == meal_id))
        await self.db.commit()

    # Items

    async def get_item(
        self, event_id: str, meal_id: str, item_id: str
    ) -> MealItemWithSignups:
        item = await self._get_item_row(event_id, meal_id, item_id)
        attendee_name = await self._attendee_name(item.assigned_attendee_id)
        return MealItemWithSignups(
            **_item_response(item, attendee_name).model_dump(),
            signups=await self.list_signups(item.id),
        )

    async def create_item(
        self, event_id: str, meal_id: str, data: MealItemCreate
    ) -> MealItemResponse:
        """Add an item to a meal, optionally assigned to an attendee."""
        name = require_text(data.name, "Name")
        await get_or_404(self.db, Meal, meal_id, "Meal", event_id=event_id)
        assignee = await resolve_assignee(self.db, event_id, data.assigned_attendee_id)

        now = datetime.now(timezone.utc)
        item = MealItem(
            meal_id=meal_id,
            name=name,
            description=data.description,
            assigned_attendee_id=assignee.id if assignee else None,
            created_at=now,
            updated_at=now,
        )
        self.db.add(item)
        await self.db.commit()

        return _item_response(item, assignee.name if assignee else None)

    async def update_item(
        self, event_id: str, meal_id: str, item_id: str, data: MealItemUpdate
    ) -> MealItemResponse:
        item = await self._get_item_row(event_id, meal_id, item_id)
        changes = data.model_dump(exclude_unset=True)

        if "name" in changes:
            item.name = require_text(changes["name"], "Name")
        if "description" in changes:
            item.description = changes["description"]
        if "assigned_attendee_id" in changes:
            assignee = await resolve_assignee(
                self.db, event_id, changes["assigned_attendee_id"]
            )
            item.assigned_attendee_id = assignee.id if assignee else None
        item.updated_at = datetime.now(timezone.utc)

        await self.db.commit()
        return _item_response(
            item, await self._attendee_name(item.assigned_attendee_id)
        )

    async def delete_item(self, event_id: str, meal_id: str, item_id: str) -> None:
        await self._get_item_row(event_id, meal_id, item_id)
        await self.db.execute(delete(MealItem).where(MealItem.id == item_id))
        await self.db.commit()

    # Signups

    async def list_signups(self, item_id: str) -> list[MealSignupResponse]:
        result = await self.db.execute(
            select(MealSignup)
            .where(MealSignup.meal_item_id == item_id)
            .order_by(MealSignup.created_at)
        )
        return [MealSignupResponse.model_validate(s) for s in result.scalars().all()]

    async def signup(
        self,
        event_id: str,
        meal_id: str,
        item_id: str,
        user: User,
        data: MealSignupCreate | None = None,
    ) -> MealSignupResponse:
        """Sign a user up to bring an item.

        Raises:
            NotFoundError: If the item is not in this event's meal
            ConflictError: If the user already signed up for the item
        """
        item = await self._get_item_row(event_id, meal_id, item_id)

        existing = await self.db.execute(
            select(MealSignup.id).where(
                MealSignup.meal_item_id == item.id,
                MealSignup.user_id == user.id,
            )
        )
        if existing.first() is not None:
            raise ConflictError("Already signed up for this item")

        signup = MealSignup(
            meal_item_id=item.id,
            user_id=user.id,
            user_name=user.name,
            user_email=user.email,
            notes=data.notes if data else None,
            created_at=datetime.now(timezone.utc),
        )
        self.db.add(signup)
        try:
            await self.db.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent signup for the same pair
            await self.db.rollback()
            raise ConflictError("Already signed up for this item") from e

        response = MealSignupResponse.model_validate(signup)
        # A rollback expires every loaded row, so nothing below reads the ORM objects
        name, email = user.name, user.email

        try:
            await AttendeeService(self.db).ensure_attendee(event_id, name, email)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(
                f"Signed {email} up for item {item_id} but could not "
                f"enroll them in event {event_id}"
            )

        return response

    async def remove_signup(
        self, event_id: str, meal_id: str, item_id: str, user: User
    ) -> None:
        """Withdraw the user's own signup for an item."""
        item = await self._get_item_row(event_id, meal_id, item_id)
        result = await self.db.execute(
            delete(MealSignup).where(
                MealSignup.meal_item_id == item.id,
                MealSignup.user_id == user.id,
            )
        )
        await self.db.commit()

        if not result.rowcount:
            raise NotFoundError("Signup not found")

    # Internals

    async def _get_item_row(
        self, event_id: str, meal_id: str, item_id: str
    ) -> MealItem:
        await get_or_404(self.db, Meal, meal_id, "Meal", event_id=event_id)
        return await get_or_404(self.db, MealItem, item_id, "Meal item", meal_id=meal_id)

    async def _attendee_name(self, attendee_id: str | None) -> str | None:
        attendee_id = blank_to_none(attendee_id)
        if attendee_id is None:
            return None
        return await self.db.scalar(
            select(Attendee.name).where(Attendee.id == attendee_id)
        )

    async def _with_items(self, meal: Meal) -> MealWithItems:
        result = await self.db.execute(
            select(MealItem, Attendee.name)
            .outerjoin(Attendee, MealItem.assigned_attendee_id == Attendee.id)
            .where(MealItem.meal_id == meal.id)
            .order_by(MealItem.name)
            .execution_options(populate_existing=True)
        )

        items = []
        for item, attendee_name in result.all():
            items.append(
                MealItemWithSignups(
                    **_item_response(item, attendee_name).model_dump(),
                    signups=await self.list_signups(item.id),
                )
            )

        return MealWithItems(
            **MealResponse.model_validate(meal).model_dump(),
            items=items,
        )
