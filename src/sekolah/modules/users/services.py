"""User service for business logic."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from sekolah.core.errors import NotFoundError
from sekolah.modules.users.models import User
from sekolah.modules.users.repos import UserRepo


logger = structlog.get_logger()


class UserService:
    """Service for user lookups and role assignment."""

    def __init__(self, repo: UserRepo) -> None:
        self.repo = repo

    async def get_user(self, user_id: UUID) -> User:
        """Get a user by ID.

        Raises:
            NotFoundError: If user not found
        """
        user = await self.repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(
                "User not found",
                resource="user",
                resource_id=str(user_id),
            )
        return user

    async def list_users(
        self,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[User], int]:
        return await self.repo.list_users(page, page_size)

    async def update_roles(
        self,
        user_id: UUID,
        roles: list[str],
        actor_id: UUID | None = None,
    ) -> User:
        """Replace a user's roles.

        Args:
            user_id: The user to update
            roles: Normalized role names
            actor_id: The administrator making the change

        Raises:
            NotFoundError: If user not found
        """
        user = await self.get_user(user_id)
        previous = user.role

        user.role = ",".join(roles)
        user = await self.repo.update(user)

        logger.info(
            "user_roles_updated",
            actor_id=str(actor_id),
            user_id=str(user.id),
            previous=previous,
            current=user.role,
        )
        return user


UserSvc = Annotated[UserService, Depends(UserService)]
