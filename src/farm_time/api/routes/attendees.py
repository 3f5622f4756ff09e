"""Attendee routes, nested under an event."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from farm_time.database.connection import get_db_session
from farm_time.models.attendee import AttendeeCreate, AttendeeResponse, AttendeeUpdate
from farm_time.planning.attendees import AttendeeService

router = APIRouter()


@router.get("", response_model=list[AttendeeResponse])
async def list_attendees(
    event_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> list[AttendeeResponse]:
    return await AttendeeService(db).list_attendees(event_id)


@router.post("", response_model=AttendeeResponse, status_code=status.HTTP_201_CREATED)
async def create_attendee(
    event_id: str,
    data: AttendeeCreate,
    db: AsyncSession = Depends(get_db_session),
) -> AttendeeResponse:
    """Add an attendee. Status defaults to attending."""
    return await AttendeeService(db).create_attendee(event_id, data)


@router.get("/{attendee_id}", response_model=AttendeeResponse)
async def get_attendee(
    event_id: str,
    attendee_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> AttendeeResponse:
    return await AttendeeService(db).get_attendee(event_id, attendee_id)


@router.put("/{attendee_id}", response_model=AttendeeResponse)
async def update_attendee(
    event_id: str,
    attendee_id: str,
    data: AttendeeUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> AttendeeResponse:
    return await AttendeeService(db).update_attendee(event_id, attendee_id, data)


@router.delete("/{attendee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attendee(
    event_id: str,
    attendee_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    """Remove an attendee. Their items and todos become unassigned."""
    await AttendeeService(db).delete_attendee(event_id, attendee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
