"""User API routes.

Authentication itself happens at the identity provider; these routes
expose the current principal and let administrators assign roles.
"""

from uuid import UUID

from fastapi import Depends, Query

from sekolah.core.auth.dependencies import CurrentUser
from sekolah.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from sekolah.core.permissions.evaluator import granted_permissions
from sekolah.core.permissions.guard import Access, AdminAccess, require_page_access
from sekolah.core.permissions.roles import format_role_display
from sekolah.modules.role_permissions.schemas import RuleSummary
from sekolah.modules.users import router
from sekolah.modules.users.schemas import (
    MeResponse,
    UserListResponse,
    UserResponse,
    UserRolesUpdate,
)
from sekolah.modules.users.services import UserSvc


# User administration lives on the "Pengaturan Users" page
user_admin_page = require_page_access(resource="pengaturan_users")


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Get current principal",
    description="Returns the current user with resolved roles and permission rules.",
)
async def get_me(
    current_user: CurrentUser,
    access: Access,
) -> MeResponse:
    """Get the current user and their access."""
    return MeResponse(
        user=UserResponse.model_validate(current_user),
        roles=list(access.roles),
        role_labels=[format_role_display(role) for role in access.roles],
        is_admin=access.is_admin,
        permissions=sorted(granted_permissions(access.rules)),
        rules=[RuleSummary.model_validate(rule) for rule in access.rules],
    )


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
    dependencies=[Depends(user_admin_page)],
)
async def list_users(
    service: UserSvc,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(
        DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Items per page"
    ),
) -> UserListResponse:
    """List users."""
    users, total = await service.list_users(page, page_size)
    return UserListResponse(
        items=[UserResponse.model_validate(u) for u in users],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get user by ID",
    dependencies=[Depends(user_admin_page)],
)
async def get_user(
    user_id: UUID,
    service: UserSvc,
) -> UserResponse:
    """Get user by ID."""
    user = await service.get_user(user_id)
    return UserResponse.model_validate(user)


@router.put(
    "/{user_id}/roles",
    response_model=UserResponse,
    summary="Replace user roles",
    description="Replaces the roles of a user. Requires an administrator role.",
)
async def update_user_roles(
    user_id: UUID,
    data: UserRolesUpdate,
    service: UserSvc,
    access: AdminAccess,
) -> UserResponse:
    """Replace a user's roles."""
    user = await service.update_roles(user_id, data.roles, actor_id=access.user_id)
    return UserResponse.model_validate(user)
