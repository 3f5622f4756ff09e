"""User administration."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farm_time.database.models import User
from farm_time.errors import ValidationError
from farm_time.models.user import UserPermissionsUpdate, UserResponse
from farm_time.planning.common import get_or_404

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_users(self) -> list[UserResponse]:
        result = await self.db.execute(
            select(User)
            .order_by(User.created_at, User.email)
            .execution_options(populate_existing=True)
        )
        return [UserResponse.model_validate(u) for u in result.scalars().all()]

    async def update_permissions(
        self, admin: User, user_id: str, data: UserPermissionsUpdate
    ) -> UserResponse:
        """Change a user's permission flags.

        Only flags present in `data` are changed; `null` leaves a flag as is.

        Raises:
            NotFoundError: If the user does not exist
            ValidationError: If an admin tries to revoke their own admin flag
        """
        if user_id == admin.id and data.is_admin is False:
            raise ValidationError("Cannot remove your own admin access")

        user = await get_or_404(self.db, User, user_id, "User")

        if data.can_create_events is not None:
            user.can_create_events = data.can_create_events
        if data.is_admin is not None:
            user.is_admin = data.is_admin
        user.updated_at = datetime.now(timezone.utc)

        await self.db.commit()

        logger.info(
            f"Admin {admin.email} set permissions for {user.email}: "
            f"is_admin={user.is_admin} can_create_events={user.can_create_events}"
        )
        return UserResponse.model_validate(user)
