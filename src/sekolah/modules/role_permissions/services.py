"""Role permission service for business logic."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from sekolah.config import settings
from sekolah.core.errors import ConflictError, ForbiddenError, NotFoundError
from sekolah.core.permissions.evaluator import evaluate
from sekolah.core.permissions.guard import AccessContext
from sekolah.core.permissions.roles import is_admin, parse_roles
from sekolah.modules.role_permissions.models import Role, RolePermission
from sekolah.modules.role_permissions.repos import (
    PermissionCatalogRepo,
    RolePermissionRepo,
    RoleRepo,
)
from sekolah.modules.role_permissions.schemas import (
    AccessCheckRequest,
    AccessCheckResponse,
    PermissionCatalogResponse,
    RoleCreate,
    RolePermissionOverview,
    RolePermissionResponse,
    RolePermissionUpsert,
    RoleResponse,
    RuleSummary,
)


logger = structlog.get_logger()


class RolePermissionService:
    """Service for administering roles and rules.

    Callers are expected to have passed the admin guard already,
    except for ``check_access`` which evaluates the caller's own roles.
    """

    def __init__(
        self,
        rules: RolePermissionRepo,
        roles: RoleRepo,
        catalog: PermissionCatalogRepo,
    ) -> None:
        self.rules = rules
        self.roles = roles
        self.catalog = catalog

    async def get_overview(self) -> RolePermissionOverview:
        """Get all rules, roles and catalog entries."""
        rules = await self.rules.list_all()
        roles = await self.roles.list_all()
        catalog = await self.catalog.list_all()

        return RolePermissionOverview(
            permissions=[RolePermissionResponse.model_validate(r) for r in rules],
            roles=[RoleResponse.model_validate(r) for r in roles],
            catalog=[PermissionCatalogResponse.model_validate(p) for p in catalog],
        )

    async def save_rule(
        self, data: RolePermissionUpsert, actor_id: UUID | None = None
    ) -> tuple[RolePermission, bool]:
        """Create or update a rule.

        Returns:
            Tuple of (rule, created)
        """
        rule, created = await self.rules.upsert(
            role_name=data.role_name,
            resource=data.resource,
            action=data.action,
            is_allowed=data.is_allowed,
        )

        logger.info(
            "role_permission_saved",
            actor_id=str(actor_id),
            role_name=rule.role_name,
            resource=rule.resource,
            action=rule.action,
            is_allowed=rule.is_allowed,
            created=created,
        )
        return rule, created

    async def delete_rule(self, rule_id: UUID, actor_id: UUID | None = None) -> None:
        """Delete a rule.

        Raises:
            NotFoundError: If the rule does not exist
        """
        rule = await self.rules.get_by_id(rule_id)
        if not rule:
            raise NotFoundError(
                "Permission rule not found",
                resource="role_permission",
                resource_id=str(rule_id),
            )

        await self.rules.delete(rule)

        logger.info(
            "role_permission_deleted",
            actor_id=str(actor_id),
            role_name=rule.role_name,
            resource=rule.resource,
            action=rule.action,
        )

    async def list_roles(self) -> list[Role]:
        return await self.roles.list_all()

    async def create_role(self, data: RoleCreate) -> Role:
        """Create a role.

        Raises:
            ConflictError: If a role with this name exists
        """
        if await self.roles.get_by_name(data.name):
            raise ConflictError(
                "Role already exists",
                error_code="role_exists",
                details={"name": data.name},
            )

        role = Role(
            name=data.name,
            description=data.description,
            is_default=data.is_default,
        )
        return await self.roles.create(role)

    async def check_access(
        self, access: AccessContext, data: AccessCheckRequest
    ) -> AccessCheckResponse:
        """Evaluate an access check and explain the decision.

        Without ``data.roles`` the caller's own context is used. With it,
        the rules for that role set are loaded and evaluated instead.

        Raises:
            ForbiddenError: If a non-administrator asks about other roles
        """
        if data.roles is None:
            decision = access.decide(data.resource, data.action)
            roles = list(access.roles)
            admin = access.is_admin
        else:
            if not access.is_admin:
                raise ForbiddenError(
                    "Only administrators may evaluate other roles",
                    error_code="admin_required",
                )
            roles = parse_roles(",".join(data.roles))
            admin = is_admin(roles, settings.admin_roles)
            rules = [] if admin else await self.rules.list_for_roles(roles)
            decision = evaluate(
                rules,
                data.resource,
                data.action,
                is_admin=admin,
                deny_overrides=settings.permission_deny_overrides,
            )

        matched = (
            RuleSummary.model_validate(decision.matched_rule)
            if decision.matched_rule is not None
            else None
        )

        return AccessCheckResponse(
            resource=data.resource,
            action=data.action,
            roles=roles,
            is_admin=admin,
            allowed=decision.allowed,
            reason=decision.reason.value,
            matched_rule=matched,
        )


RolePermissionSvc = Annotated[RolePermissionService, Depends(RolePermissionService)]
