"""User management routes (admin only)."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from farm_time.auth.dependencies import require_admin
from farm_time.database.connection import get_db_session
from farm_time.database.models import User
from farm_time.models.user import UserPermissionsUpdate, UserResponse
from farm_time.planning.users import UserService

router = APIRouter()


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> list[UserResponse]:
    """List all users."""
    return await UserService(db).list_users()


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user_permissions(
    user_id: str,
    data: UserPermissionsUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    """Grant or revoke a user's admin and event-creation flags."""
    return await UserService(db).update_permissions(admin, user_id, data)
