"""Tests for automatic meal placeholders."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from sqlalchemy import select

from farm_time.database.models import Event, Meal, MealType
from farm_time.planning.meal_generator import MealPlan, generate_meals, plan_meals


def _utc(year: int, month: int, day: int, hour: int) -> datetime:
    return datetime(year, month, day, hour, 0, tzinfo=timezone.utc)


class TestPlanMealsSingleDay:
    """Events that start and end on the same date."""

    def test_morning_to_afternoon_gets_lunch_only(self):
        plans = plan_meals(_utc(2024, 6, 15, 9), _utc(2024, 6, 15, 17))
        assert plans == [MealPlan("Lunch", MealType.LUNCH, date(2024, 6, 15))]

    def test_morning_to_night_gets_lunch_and_dinner(self):
        plans = plan_meals(_utc(2024, 6, 15, 8), _utc(2024, 6, 15, 21))
        assert [p.name for p in plans] == ["Lunch", "Dinner"]
        assert [p.meal_type for p in plans] == [MealType.LUNCH, MealType.DINNER]

    def test_eleven_oclock_start_still_gets_lunch(self):
        plans = plan_meals(_utc(2024, 6, 15, 11), _utc(2024, 6, 15, 15))
        assert [p.name for p in plans] == ["Lunch"]

    def test_afternoon_only_gets_nothing(self):
        assert plan_meals(_utc(2024, 6, 15, 14), _utc(2024, 6, 15, 17)) == []

    def test_evening_gets_dinner_only(self):
        plans = plan_meals(_utc(2024, 6, 15, 17), _utc(2024, 6, 15, 22))
        assert [p.name for p in plans] == ["Dinner"]


class TestPlanMealsMultiDay:
    """Events spanning several dates get weekday-prefixed names."""

    def test_three_day_event(self):
        # Friday 14:00 to Sunday 10:00
        plans = plan_meals(_utc(2024, 6, 14, 14), _utc(2024, 6, 16, 10))

        assert [p.name for p in plans] == [
            "Friday Dinner",
            "Saturday Lunch",
            "Saturday Dinner",
        ]
        assert [p.meal_date for p in plans] == [
            date(2024, 6, 14),
            date(2024, 6, 15),
            date(2024, 6, 15),
        ]

    def test_last_day_lunch_when_ending_after_noon(self):
        plans = plan_meals(_utc(2024, 6, 14, 18), _utc(2024, 6, 15, 13))
        assert [p.name for p in plans] == ["Friday Dinner", "Saturday Lunch"]

    def test_last_day_dinner_when_ending_late(self):
        plans = plan_meals(_utc(2024, 6, 14, 10), _utc(2024, 6, 15, 20))
        assert [p.name for p in plans] == [
            "Friday Lunch",
            "Friday Dinner",
            "Saturday Lunch",
            "Saturday Dinner",
        ]

    def test_end_before_start_gets_nothing(self):
        assert plan_meals(_utc(2024, 6, 16, 9), _utc(2024, 6, 14, 21)) == []


class TestPlanMealsTimeZone:
    def test_dates_follow_given_zone(self):
        start = _utc(2024, 6, 14, 23)
        end = _utc(2024, 6, 15, 20)

        # In UTC: Friday 23:00 to Saturday 20:00
        assert [p.name for p in plan_meals(start, end)] == [
            "Friday Dinner",
            "Saturday Lunch",
            "Saturday Dinner",
        ]

        # In New York: Friday 19:00 to Saturday 16:00
        new_york = ZoneInfo("America/New_York")
        assert [p.name for p in plan_meals(start, end, new_york)] == [
            "Friday Dinner",
            "Saturday Lunch",
        ]

    def test_offsets_of_instants_used_without_zone(self):
        start = datetime.fromisoformat("2024-06-15T08:00:00-05:00")
        end = datetime.fromisoformat("2024-06-15T21:00:00-05:00")
        assert [p.name for p in plan_meals(start, end)] == ["Lunch", "Dinner"]


class TestGenerateMeals:
    async def test_creates_meals_for_event(self, db):
        start = _utc(2024, 6, 14, 14)
        end = _utc(2024, 6, 16, 10)
        event = Event(title="Work weekend", start_time=start, end_time=end)
        db.add(event)
        await db.commit()

        created = await generate_meals(db, event.id, start, end)

        assert [m.name for m in created] == [
            "Friday Dinner",
            "Saturday Lunch",
            "Saturday Dinner",
        ]
        assert all(m.event_id == event.id for m in created)

        stored = (
            await db.execute(select(Meal).where(Meal.event_id == event.id))
        ).scalars().all()
        assert len(stored) == 3
        assert {m.meal_type for m in stored} == {"lunch", "dinner"}

    async def test_failures_are_skipped(self, db):
        # No such event: every insert violates the foreign key
        created = await generate_meals(
            db, "missing-event", _utc(2024, 6, 15, 8), _utc(2024, 6, 15, 21)
        )
        assert created == []
