"""Permission decorators for route protection.

The decorated route must accept an ``access`` keyword argument of type
``Access`` so the request's AccessContext is resolved before the check.

Usage:
    @router.delete("/{journal_id}")
    @require_permission("jurnal", "delete")
    async def delete_journal(journal_id: UUID, access: Access):
        ...
"""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar, cast

import structlog

from sekolah.core.errors import ForbiddenError, PermissionDeniedError
from sekolah.core.permissions.guard import AccessContext


if TYPE_CHECKING:
    from fastapi import Request


logger = structlog.get_logger()

P = ParamSpec("P")
R = TypeVar("R")


def _check_permissions(
    access: AccessContext,
    permissions: list[tuple[str, str]],
    require_all: bool,
    request: "Request | None" = None,
) -> bool:
    """Common permission checking logic.

    Args:
        access: The request's access context
        permissions: List of (resource, action) tuples to check
        require_all: If True, every permission is needed; if False, any one
        request: Optional request for logging context

    Returns:
        True if the check passes
    """
    endpoint = request.url.path if request else "unknown"
    perm_strs = [f"{r}:{a}" for r, a in permissions]

    if access.is_admin:
        logger.warning(
            "admin_bypass",
            user_id=str(access.user_id),
            permissions=perm_strs,
            endpoint=endpoint,
        )
        return True

    if require_all:
        has_perm = access.can_all(permissions)
    else:
        has_perm = access.can_any(permissions)

    if not has_perm:
        logger.info(
            "permission_denied",
            user_id=str(access.user_id),
            roles=list(access.roles),
            permissions=perm_strs,
            require_all=require_all,
            endpoint=endpoint,
        )

    return has_perm


def _get_access(
    kwargs: dict[str, Any],
) -> tuple[AccessContext | None, "Request | None"]:
    access = cast("AccessContext | None", kwargs.get("access"))
    request = cast("Request | None", kwargs.get("request"))
    return access, request


def _guard(
    permissions: list[tuple[str, str]],
    require_all: bool,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            access, request = _get_access(kwargs)

            if access is None:
                raise ForbiddenError(
                    "Permission check failed",
                    error_code="permission_check_failed",
                )

            if not _check_permissions(access, permissions, require_all, request):
                perm_strs = [f"{r}:{a}" for r, a in permissions]
                if require_all:
                    message = f"Missing required permissions: {', '.join(perm_strs)}"
                else:
                    message = (
                        f"Missing required permission. Need one of: {', '.join(perm_strs)}"
                    )
                raise PermissionDeniedError(
                    message,
                    details={"required_permissions": perm_strs},
                )

            return await func(*args, **kwargs)

        return wrapper

    return decorator


def require_permission(
    resource: str, action: str
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires a specific permission to access a route.

    Args:
        resource: The resource being accessed (e.g., "nilai")
        action: The action being performed (e.g., "update")

    Raises:
        PermissionDeniedError: If the user lacks the permission
    """
    return _guard([(resource, action)], require_all=True)


def require_any_permission(
    permissions: list[tuple[str, str]],
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires any one of the specified permissions.

    Usage:
        @router.get("/rekap")
        @require_any_permission([("rekap_jurnal", "view"), ("jurnal", "export")])
        async def get_recap(access: Access):
            ...
    """
    return _guard(permissions, require_all=False)


def require_all_permissions(
    permissions: list[tuple[str, str]],
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator that requires all of the specified permissions."""
    return _guard(permissions, require_all=True)
