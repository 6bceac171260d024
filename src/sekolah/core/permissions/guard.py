"""Request-level access control.

Connects incoming requests to the permission evaluator:

- resolves the current user's roles and admin status
- fetches the rules for those roles once per request
- derives the protected resource from the request path
- turns denials into 403 responses
"""

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Annotated, Any
from uuid import UUID

import structlog
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from sekolah.api.dependencies import DBSession
from sekolah.config import settings
from sekolah.core.auth.dependencies import CurrentUser
from sekolah.core.constants import API_V1_PREFIX, DEFAULT_PAGE_ACTION
from sekolah.core.errors import ForbiddenError, PermissionDeniedError
from sekolah.core.permissions.evaluator import (
    AccessRequest,
    Decision,
    RuleLike,
    evaluate,
    has_all_permissions,
    has_any_permission,
)
from sekolah.core.permissions.roles import is_admin, parse_roles


logger = structlog.get_logger()


def resource_from_path(path: str, prefix: str | None = API_V1_PREFIX) -> str:
    """Derive the protected resource from a request path.

    The API prefix is stripped, then the first path segment is
    lower-cased with hyphens turned into underscores.

    Examples:
        >>> resource_from_path("/api/v1/pengaturan-data/libur")
        'pengaturan_data'
        >>> resource_from_path("/Jurnal")
        'jurnal'
    """
    if prefix and (path == prefix or path.startswith(prefix + "/")):
        path = path[len(prefix) :]

    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        return ""

    return segments[0].lower().replace("-", "_")


@dataclass(frozen=True)
class AccessContext:
    """Access information for one request.

    Built once per request and attached to ``request.state.access``;
    never shared between requests.

    Attributes:
        user_id: The acting user's id
        roles: Normalized role names
        is_admin: Whether any role is an administrator role
        rules: Rules that apply to ``roles``
        deny_overrides: Whether matching denials win over grants
    """

    user_id: UUID | None
    roles: tuple[str, ...]
    is_admin: bool
    rules: tuple[RuleLike, ...] = field(default=(), repr=False)
    deny_overrides: bool = False

    def request(self, resource: str, action: str) -> AccessRequest:
        return AccessRequest(roles=self.roles, resource=resource, action=action)

    def decide(self, resource: str, action: str) -> Decision:
        return evaluate(
            self.rules,
            resource,
            action,
            is_admin=self.is_admin,
            deny_overrides=self.deny_overrides,
        )

    def can(self, resource: str, action: str = DEFAULT_PAGE_ACTION) -> bool:
        return self.decide(resource, action).allowed

    def can_any(self, checks: Iterable[tuple[str, str]]) -> bool:
        return has_any_permission(
            self.rules, checks, self.is_admin, self.deny_overrides
        )

    def can_all(self, checks: Iterable[tuple[str, str]]) -> bool:
        return has_all_permissions(
            self.rules, checks, self.is_admin, self.deny_overrides
        )


async def build_access_context(user: Any, db: AsyncSession) -> AccessContext:
    """Resolve roles and load rules for a user.

    Administrators skip the rule query since they bypass evaluation.
    Users without roles still receive rules stored for the ``*`` role.
    """
    from sekolah.modules.role_permissions.repos import (  # noqa: PLC0415
        RolePermissionRepository,
    )

    roles = tuple(parse_roles(getattr(user, "role", None)))
    admin = is_admin(roles, settings.admin_roles)

    rules: tuple[RuleLike, ...] = ()
    if not admin:
        rules = tuple(await RolePermissionRepository(db).list_for_roles(roles))

    return AccessContext(
        user_id=getattr(user, "id", None),
        roles=roles,
        is_admin=admin,
        rules=rules,
        deny_overrides=settings.permission_deny_overrides,
    )


async def get_access_context(
    request: Request,
    user: CurrentUser,
    db: DBSession,
) -> AccessContext:
    """Dependency that provides the request's AccessContext."""
    context = await build_access_context(user, db)
    request.state.access = context
    return context


Access = Annotated[AccessContext, Depends(get_access_context)]


def enforce(
    access: AccessContext,
    resource: str,
    action: str,
    path: str | None = None,
) -> Decision:
    """Evaluate an access check and raise on denial.

    Raises:
        PermissionDeniedError: If the evaluator denies access
    """
    check = access.request(resource, action)
    decision = access.decide(check.resource, check.action)

    if not decision.allowed:
        logger.info(
            "permission_denied",
            user_id=str(access.user_id),
            roles=list(check.roles),
            resource=check.resource,
            action=check.action,
            reason=decision.reason.value,
            endpoint=path or "unknown",
        )
        raise PermissionDeniedError(resource=check.resource, action=check.action)

    if access.is_admin:
        logger.warning(
            "admin_bypass",
            user_id=str(access.user_id),
            resource=resource,
            action=action,
            endpoint=path or "unknown",
        )

    return decision


def require_page_access(
    action: str = DEFAULT_PAGE_ACTION,
    resource: str | None = None,
) -> Callable[[Request, AccessContext], Awaitable[AccessContext]]:
    """Build a dependency that guards a route by its path.

    Usage:
        @router.get("", dependencies=[Depends(require_page_access())])
        async def list_journals(...):
            ...

    Args:
        action: Action to check, "view" for page loads
        resource: Explicit resource; derived from the path when omitted

    Returns:
        FastAPI dependency returning the request's AccessContext
    """

    async def dependency(request: Request, access: Access) -> AccessContext:
        path = request.url.path
        enforce(access, resource or resource_from_path(path), action, path)
        return access

    return dependency


async def require_admin(access: Access) -> AccessContext:
    """Dependency that only lets administrators through.

    Raises:
        ForbiddenError: If the user holds no administrator role
    """
    if not access.is_admin:
        raise ForbiddenError(
            "Administrator role required",
            error_code="admin_required",
        )
    return access


AdminAccess = Annotated[AccessContext, Depends(require_admin)]
