"""Role permission API routes.

Rule and role administration is reserved for administrators. The
access check endpoint is open to any authenticated user for their own
roles.
"""

from uuid import UUID

from fastapi import Response, status

from sekolah.core.permissions.guard import Access, AdminAccess
from sekolah.modules.role_permissions import router
from sekolah.modules.role_permissions.schemas import (
    AccessCheckRequest,
    AccessCheckResponse,
    RoleCreate,
    RolePermissionOverview,
    RolePermissionResponse,
    RolePermissionUpsert,
    RoleResponse,
)
from sekolah.modules.role_permissions.services import RolePermissionSvc


# ============================================================
# Rules
# ============================================================


@router.get(
    "/role-permissions",
    response_model=RolePermissionOverview,
    summary="List role permissions",
    description="Returns every rule together with the roles and permission catalog.",
)
async def list_role_permissions(
    service: RolePermissionSvc,
    access: AdminAccess,  # noqa: ARG001 - admin guard
) -> RolePermissionOverview:
    """List all rules, roles and catalog entries."""
    return await service.get_overview()


@router.post(
    "/role-permissions",
    response_model=RolePermissionResponse,
    summary="Save role permission",
    description="Creates or updates the rule for a (role, resource, action) triple.",
)
async def save_role_permission(
    data: RolePermissionUpsert,
    service: RolePermissionSvc,
    access: AdminAccess,
    response: Response,
) -> RolePermissionResponse:
    """Upsert a rule."""
    rule, created = await service.save_rule(data, actor_id=access.user_id)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return RolePermissionResponse.model_validate(rule)


@router.delete(
    "/role-permissions/{rule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete role permission",
)
async def delete_role_permission(
    rule_id: UUID,
    service: RolePermissionSvc,
    access: AdminAccess,
) -> None:
    """Remove a rule."""
    await service.delete_rule(rule_id, actor_id=access.user_id)


@router.post(
    "/role-permissions/check",
    response_model=AccessCheckResponse,
    summary="Check access",
    description=(
        "Evaluates a resource/action pair for the current user, or for an "
        "arbitrary role set when called by an administrator."
    ),
)
async def check_access(
    data: AccessCheckRequest,
    service: RolePermissionSvc,
    access: Access,
) -> AccessCheckResponse:
    """Explain an access decision."""
    return await service.check_access(access, data)


# ============================================================
# Roles
# ============================================================


@router.get(
    "/roles",
    response_model=list[RoleResponse],
    summary="List roles",
)
async def list_roles(
    service: RolePermissionSvc,
    access: AdminAccess,  # noqa: ARG001 - admin guard
) -> list[RoleResponse]:
    """List all roles."""
    roles = await service.list_roles()
    return [RoleResponse.model_validate(r) for r in roles]


@router.post(
    "/roles",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create role",
)
async def create_role(
    data: RoleCreate,
    service: RolePermissionSvc,
    access: AdminAccess,  # noqa: ARG001 - admin guard
) -> RoleResponse:
    """Create a role."""
    role = await service.create_role(data)
    return RoleResponse.model_validate(role)
