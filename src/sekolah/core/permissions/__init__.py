"""Permission system for role-based access control (RBAC).

The evaluator and role parsing are pure and re-exported here. Request
guards live in ``sekolah.core.permissions.guard`` and
``sekolah.core.permissions.decorators``; import them directly, since they
pull in the web and database layers.
"""

from sekolah.core.permissions.evaluator import (
    AccessRequest,
    Decision,
    DecisionReason,
    PermissionRule,
    RuleLike,
    evaluate,
    granted_permissions,
    has_all_permissions,
    has_any_permission,
    has_permission,
    match_action,
    match_resource,
    rules_for_roles,
)
from sekolah.core.permissions.roles import format_role_display, is_admin, parse_roles


__all__ = [
    # Evaluator
    "AccessRequest",
    "Decision",
    "DecisionReason",
    "PermissionRule",
    "RuleLike",
    "evaluate",
    # Roles
    "format_role_display",
    "granted_permissions",
    "has_all_permissions",
    "has_any_permission",
    "has_permission",
    "is_admin",
    "match_action",
    "match_resource",
    "parse_roles",
    "rules_for_roles",
]
