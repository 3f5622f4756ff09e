"""Todo routes, nested under an event."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from farm_time.database.connection import get_db_session
from farm_time.models.todo import TodoCreate, TodoResponse, TodoUpdate
from farm_time.planning.todos import TodoService

router = APIRouter()


@router.get("", response_model=list[TodoResponse])
async def list_todos(
    event_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> list[TodoResponse]:
    """List todos, open ones first."""
    return await TodoService(db).list_todos(event_id)


@router.post("", response_model=TodoResponse, status_code=status.HTTP_201_CREATED)
async def create_todo(
    event_id: str,
    data: TodoCreate,
    db: AsyncSession = Depends(get_db_session),
) -> TodoResponse:
    return await TodoService(db).create_todo(event_id, data)


@router.get("/{todo_id}", response_model=TodoResponse)
async def get_todo(
    event_id: str,
    todo_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> TodoResponse:
    return await TodoService(db).get_todo(event_id, todo_id)


@router.put("/{todo_id}", response_model=TodoResponse)
async def update_todo(
    event_id: str,
    todo_id: str,
    data: TodoUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> TodoResponse:
    """Update a todo. `assigned_attendee_id` of null or "" unassigns it."""
    return await TodoService(db).update_todo(event_id, todo_id, data)


@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_todo(
    event_id: str,
    todo_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await TodoService(db).delete_todo(event_id, todo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
