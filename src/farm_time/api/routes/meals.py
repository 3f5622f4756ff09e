"""Meal, meal item and signup routes, nested under an event.

## Signups

- POST .../items/{item_id}/signup - Sign the current user up to bring the item
- DELETE .../items/{item_id}/signup - Withdraw the current user's signup

Signing up also adds the user to the event's attendees if they are not on
the list yet.
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from farm_time.auth.dependencies import get_current_user
from farm_time.database.connection import get_db_session
from farm_time.database.models import User
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
from farm_time.planning.meals import MealService

router = APIRouter()


# Meals


@router.get("", response_model=list[MealWithItems])
async def list_meals(
    event_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> list[MealWithItems]:
    """List meals with their items and signups."""
    return await MealService(db).list_meals(event_id)


@router.post("", response_model=MealResponse, status_code=status.HTTP_201_CREATED)
async def create_meal(
    event_id: str,
    data: MealCreate,
    db: AsyncSession = Depends(get_db_session),
) -> MealResponse:
    return await MealService(db).create_meal(event_id, data)


@router.get("/{meal_id}", response_model=MealWithItems)
async def get_meal(
    event_id: str,
    meal_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MealWithItems:
    return await MealService(db).get_meal(event_id, meal_id)


@router.put("/{meal_id}", response_model=MealResponse)
async def update_meal(
    event_id: str,
    meal_id: str,
    data: MealUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> MealResponse:
    return await MealService(db).update_meal(event_id, meal_id, data)


@router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(
    event_id: str,
    meal_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    """Delete a meal with its items and signups."""
    await MealService(db).delete_meal(event_id, meal_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Items


@router.post(
    "/{meal_id}/items",
    response_model=MealItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_item(
    event_id: str,
    meal_id: str,
    data: MealItemCreate,
    db: AsyncSession = Depends(get_db_session),
) -> MealItemResponse:
    return await MealService(db).create_item(event_id, meal_id, data)


@router.get("/{meal_id}/items/{item_id}", response_model=MealItemWithSignups)
async def get_item(
    event_id: str,
    meal_id: str,
    item_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MealItemWithSignups:
    return await MealService(db).get_item(event_id, meal_id, item_id)


@router.put("/{meal_id}/items/{item_id}", response_model=MealItemResponse)
async def update_item(
    event_id: str,
    meal_id: str,
    item_id: str,
    data: MealItemUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> MealItemResponse:
    """Update an item. `assigned_attendee_id` of null or "" unassigns it."""
    return await MealService(db).update_item(event_id, meal_id, item_id, data)


@router.delete("/{meal_id}/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    event_id: str,
    meal_id: str,
    item_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await MealService(db).delete_item(event_id, meal_id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Signups


@router.post(
    "/{meal_id}/items/{item_id}/signup",
    response_model=MealSignupResponse,
    status_code=status.HTTP_201_CREATED,
)
async def signup_for_item(
    event_id: str,
    meal_id: str,
    item_id: str,
    data: MealSignupCreate | None = Body(default=None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MealSignupResponse:
    """Sign up to bring an item. Returns 409 if already signed up."""
    return await MealService(db).signup(event_id, meal_id, item_id, user, data)


@router.delete(
    "/{meal_id}/items/{item_id}/signup", status_code=status.HTTP_204_NO_CONTENT
)
async def remove_signup(
    event_id: str,
    meal_id: str,
    item_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await MealService(db).remove_signup(event_id, meal_id, item_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
