"""Todo service."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from farm_time.database.models import Attendee, Todo
from farm_time.models.todo import TodoCreate, TodoResponse, TodoUpdate
from farm_time.planning.common import (
    ensure_event,
    get_or_404,
    require_text,
    resolve_assignee,
)


def _todo_response(todo: Todo, attendee_name: str | None) -> TodoResponse:
    response = TodoResponse.model_validate(todo)
    response.assigned_attendee_name = attendee_name
    return response


class TodoService:
    """Tasks attached to an event."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_todos(self, event_id: str) -> list[TodoResponse]:
        """List an event's todos, open ones first, then by creation time."""
        await ensure_event(self.db, event_id)
        return await self.todos_for_event(event_id)

    async def todos_for_event(self, event_id: str) -> list[TodoResponse]:
        result = await self.db.execute(
            select(Todo, Attendee.name)
            .outerjoin(Attendee, Todo.assigned_attendee_id == Attendee.id)
            .where(Todo.event_id == event_id)
            .order_by(Todo.completed, Todo.created_at)
            .execution_options(populate_existing=True)
        )
        return [_todo_response(todo, name) for todo, name in result.all()]

    async def get_todo(self, event_id: str, todo_id: str) -> TodoResponse:
        todo = await get_or_404(self.db, Todo, todo_id, "Todo", event_id=event_id)
        return _todo_response(todo, await self._attendee_name(todo))

    async def create_todo(self, event_id: str, data: TodoCreate) -> TodoResponse:
        """Create an open todo. Title is required."""
        title = require_text(data.title, "Title")
        await ensure_event(self.db, event_id)
        assignee = await resolve_assignee(self.db, event_id, data.assigned_attendee_id)

        now = datetime.now(timezone.utc)
        todo = Todo(
            event_id=event_id,
            title=title,
            description=data.description,
            completed=False,
            assigned_attendee_id=assignee.id if assignee else None,
            created_at=now,
            updated_at=now,
        )
        self.db.add(todo)
        await self.db.commit()

        return _todo_response(todo, assignee.name if assignee else None)

    async def update_todo(
        self, event_id: str, todo_id: str, data: TodoUpdate
    ) -> TodoResponse:
        todo = await get_or_404(self.db, Todo, todo_id, "Todo", event_id=event_id)
        changes = data.model_dump(exclude_unset=True)

        if "title" in changes:
            todo.title = require_text(changes["title"], "Title")
        if "description" in changes:
            todo.description = changes["description"]
        if "completed" in changes and changes["completed"] is not None:
            todo.completed = changes["completed"]
        if "assigned_attendee_id" in changes:
            assignee = await resolve_assignee(
                self.db, event_id, changes["assigned_attendee_id"]
            )
            todo.assigned_attendee_id = assignee.id if assignee else None
        todo.updated_at = datetime.now(timezone.utc)

        await self.db.commit()
        return _todo_response(todo, await self._attendee_name(todo))

    async def delete_todo(self, event_id: str, todo_id: str) -> None:
        await get_or_404(self.db, Todo, todo_id, "Todo", event_id=event_id)
        await self.db.execute(delete(Todo).where(Todo.id == todo_id))
        await self.db.commit()

    async def _attendee_name(self, todo: Todo) -> str | None:
        if todo.assigned_attendee_id is None:
            return None
        return await self.db.scalar(
            select(Attendee.name).where(Attendee.id == todo.assigned_attendee_id)
        )
