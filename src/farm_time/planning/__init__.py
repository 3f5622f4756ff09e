"""Event planning services.

Each service wraps an `AsyncSession` and returns response models, so route
handlers stay thin:

```python
service = EventService(db)
event = await service.create_event(EventCreate(...))
```
"""

from farm_time.planning.attendees import AttendeeService
from farm_time.planning.events import EventService
from farm_time.planning.meal_generator import MealPlan, generate_meals, plan_meals
from farm_time.planning.meals import MealService
from farm_time.planning.todos import TodoService
from farm_time.planning.users import UserService

__all__ = [
    "AttendeeService",
    "EventService",
    "MealService",
    "TodoService",
    "UserService",
    "MealPlan",
    "generate_meals",
    "plan_meals",
]
