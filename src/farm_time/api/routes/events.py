"""Event routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from farm_time.config import Settings, get_app_settings
from farm_time.database.connection import get_db_session
from farm_time.models.event import EventCreate, EventResponse, EventUpdate, EventWithAll
from farm_time.planning.events import EventService

router = APIRouter()


@router.get("", response_model=list[EventResponse])
async def list_events(
    db: AsyncSession = Depends(get_db_session),
) -> list[EventResponse]:
    """List all events ordered by start time."""
    return await EventService(db).list_events()


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> EventResponse:
    """Create an event.

    Lunch and dinner placeholders are created for the days it covers.
    """
    return await EventService(db).create_event(data, tz=settings.event_tz)


@router.get("/{event_id}", response_model=EventWithAll)
async def get_event(
    event_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> EventWithAll:
    """Get an event with its attendees, meals (items, signups) and todos."""
    return await EventService(db).get_event_with_all(event_id)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    data: EventUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> EventResponse:
    return await EventService(db).update_event(event_id, data)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    """Delete an event and everything under it."""
    await EventService(db).delete_event(event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
