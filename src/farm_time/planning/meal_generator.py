"""Placeholder meals derived from an event's time span.

When an event is created, lunch and dinner placeholders are created for
every calendar day it covers so people can start signing up for items.

## Rules

For each date `d` from the start date to the end date (inclusive):

- **Lunch** when
  - `d` is the first day and the event starts at or before 11:xx,
  - `d` is a middle day, or
  - `d` is the last day of a multi-day event that runs to 12:00 or later.
- **Dinner** when `d` is not the last day, or the event runs to 20:00 or
  later on the last day.

Single-day events get plain names ("Lunch", "Dinner"); multi-day events
prefix the weekday ("Saturday Lunch").

Dates are taken in the event time zone when one is given, otherwise in the
offsets the start and end instants carry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from farm_time.database.models import Meal, MealType
from farm_time.models.meal import MealResponse

logger = logging.getLogger(__name__)

LUNCH_LATEST_START_HOUR = 11
LUNCH_EARLIEST_END_HOUR = 12
DINNER_EARLIEST_END_HOUR = 20


@dataclass(frozen=True)
class MealPlan:
    """A meal to be created for an event."""

    name: str
    meal_type: MealType
    meal_date: date


def _localize(value: datetime, tz: tzinfo | None) -> datetime:
    if tz is None or value.tzinfo is None:
        return value
    return value.astimezone(tz)


def plan_meals(
    start: datetime,
    end: datetime,
    tz: tzinfo | None = None,
) -> list[MealPlan]:
    """Work out which placeholder meals an event should get.

    Args:
        start: Event start instant
        end: Event end instant
        tz: Time zone that decides calendar dates and hours

    Returns:
        Meals in date order, lunch before dinner on each day. Empty when
        the event ends on an earlier date than it starts.
    """
    start = _localize(start, tz)
    end = _localize(end, tz)

    start_date = start.date()
    end_date = end.date()
    multi_day = start_date != end_date

    plans: list[MealPlan] = []
    day = start_date
    while day <= end_date:
        is_first = day == start_date
        is_last = day == end_date
        prefix = f"{day.strftime('%A')} " if multi_day else ""

        if is_first:
            lunch = start.hour <= LUNCH_LATEST_START_HOUR
        elif is_last:
            lunch = end.hour >= LUNCH_EARLIEST_END_HOUR
        else:
            lunch = True

        dinner = not is_last or end.hour >= DINNER_EARLIEST_END_HOUR

        if lunch:
            plans.append(MealPlan(f"{prefix}Lunch", MealType.LUNCH, day))
        if dinner:
            plans.append(MealPlan(f"{prefix}Dinner", MealType.DINNER, day))

        day += timedelta(days=1)

    return plans


async def generate_meals(
    db: AsyncSession,
    event_id: str,
    start: datetime,
    end: datetime,
    tz: tzinfo | None = None,
) -> list[MealResponse]:
    """Create the placeholder meals for a newly created event.

    Best effort: a meal that fails to insert is logged and skipped. Nothing
    is raised and the event itself is never rolled back.

    Returns:
        The meals that were created
    """
    created: list[MealResponse] = []

    for plan in plan_meals(start, end, tz):
        meal = Meal(
            event_id=event_id,
            name=plan.name,
            meal_type=plan.meal_type.value,
            meal_date=plan.meal_date,
        )
        db.add(meal)
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to create meal '{plan.name}' for event {event_id}: {e}")
            continue
        created.append(MealResponse.model_validate(meal))

    if created:
        logger.info(f"Created {len(created)} meals for event {event_id}")

    return created
