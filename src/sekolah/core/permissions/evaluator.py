"""Permission evaluation logic.

This module decides whether a principal may perform an action on a
resource, given the permission rules visible to that principal.

Everything here is a pure function over its inputs: no I/O, no logging
and no shared state. Callers fetch the rules (see
``sekolah.modules.role_permissions.repos``) and resolve the admin flag
(see ``sekolah.core.permissions.roles``) before calling in.

Matching rules:
    - resource: ``*``, an exact match, or a hierarchical parent
      (``master`` covers ``master.siswa`` and ``ketidakhadiran:IZIN``)
    - action: ``*``, ``manage``, an exact match, the ``view``/``read``
      alias, or ``view``/``manage`` covering any ``tab:*`` action
    - the rule must be allowed
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol

from sekolah.core.constants import (
    MANAGE_ACTION,
    RESOURCE_SEPARATORS,
    TAB_ACTION_PREFIX,
    WILDCARD,
)


class RuleLike(Protocol):
    """Anything that can be evaluated as a permission rule.

    ``PermissionRule`` and the ``RolePermission`` ORM model both qualify.
    """

    @property
    def resource(self) -> str: ...

    @property
    def action(self) -> str: ...

    @property
    def is_allowed(self) -> bool: ...


@dataclass(frozen=True, slots=True)
class PermissionRule:
    """A single (role, resource, action, allowed) grant or denial.

    Attributes:
        role: Role name the rule applies to, or ``*`` for every role
        resource: Dot-delimited resource identifier, or ``*``
        action: Action identifier, ``*``, or the ``manage`` meta-action
        is_allowed: Whether the rule grants (True) or denies (False)
    """

    role: str
    resource: str
    action: str
    is_allowed: bool = True

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PermissionRule":
        """Build a rule from a row or document.

        Accepts both ``role`` and ``role_name`` keys, since stored rows use
        the latter. A missing or blank role becomes ``""``, which no
        principal holds; only an explicit ``*`` applies to everyone.
        """
        role = data.get("role") or data.get("role_name") or ""
        return cls(
            role=str(role).strip(),
            resource=str(data.get("resource") or ""),
            action=str(data.get("action") or ""),
            is_allowed=bool(data.get("is_allowed", True)),
        )

    @property
    def name(self) -> str:
        """Return the rule as 'resource:action'."""
        return f"{self.resource}:{self.action}"


@dataclass(frozen=True, slots=True)
class AccessRequest:
    """A single access check, built per request and never stored."""

    roles: tuple[str, ...]
    resource: str
    action: str


class DecisionReason(StrEnum):
    """Why an evaluation ended the way it did."""

    ADMIN_OVERRIDE = "admin_override"
    GRANTED = "granted"
    DENIED_BY_RULE = "denied_by_rule"
    NO_MATCHING_RULE = "no_matching_rule"
    INVALID_REQUEST = "invalid_request"


@dataclass(frozen=True, slots=True)
class Decision:
    """Outcome of an evaluation.

    ``matched_rule`` is the rule that granted (or, with deny overrides,
    denied) access, if any.
    """

    allowed: bool
    reason: DecisionReason
    matched_rule: RuleLike | None = None

    def __bool__(self) -> bool:
        return self.allowed


def match_resource(required: str, possessed: str) -> bool:
    """Check whether a rule's resource covers the requested resource.

    Args:
        required: The resource being accessed (e.g., "master.siswa")
        possessed: The resource named by the rule (e.g., "master")

    Returns:
        True if the rule covers the requested resource

    Examples:
        >>> match_resource("master.siswa", "master")
        True
        >>> match_resource("masterdata", "master")
        False
    """
    if possessed == WILDCARD:
        return True
    if not possessed:
        return False
    if possessed == required:
        return True
    return any(required.startswith(possessed + sep) for sep in RESOURCE_SEPARATORS)


def match_action(required: str, possessed: str) -> bool:
    """Check whether a rule's action covers the requested action.

    Args:
        required: The action being performed (e.g., "delete")
        possessed: The action named by the rule (e.g., "manage")

    Returns:
        True if the rule covers the requested action
    """
    if possessed in (WILDCARD, MANAGE_ACTION):
        return True
    if not possessed:
        return False
    if possessed == required:
        return True

    p = possessed.lower()
    r = required.lower()

    # view and read are interchangeable
    if {p, r} == {"view", "read"}:
        return True

    # Page-level view covers every tab on that page
    return p in ("view", MANAGE_ACTION) and r.startswith(TAB_ACTION_PREFIX)


def rule_matches(rule: RuleLike, resource: str, action: str) -> bool:
    """Check whether a rule applies to a resource/action pair.

    The allow flag is not considered here.
    """
    return match_resource(resource, rule.resource) and match_action(
        action, rule.action
    )


def evaluate(
    rules: Iterable[RuleLike] | None,
    resource: str,
    action: str,
    is_admin: bool = False,
    deny_overrides: bool = False,
) -> Decision:
    """Evaluate an access check and explain the outcome.

    Args:
        rules: Rules visible to the principal (already filtered by role)
        resource: The resource being accessed
        action: The action being performed
        is_admin: Whether the principal holds an administrator role
        deny_overrides: If True, any matching denial wins over grants

    Returns:
        The decision, its reason and the deciding rule
    """
    if is_admin:
        return Decision(allowed=True, reason=DecisionReason.ADMIN_OVERRIDE)

    if not resource or not action or not rules:
        reason = (
            DecisionReason.INVALID_REQUEST
            if not resource or not action
            else DecisionReason.NO_MATCHING_RULE
        )
        return Decision(allowed=False, reason=reason)

    granted_by: RuleLike | None = None

    for rule in rules:
        if not rule_matches(rule, resource, action):
            continue
        if rule.is_allowed:
            if not deny_overrides:
                return Decision(
                    allowed=True,
                    reason=DecisionReason.GRANTED,
                    matched_rule=rule,
                )
            if granted_by is None:
                granted_by = rule
        elif deny_overrides:
            return Decision(
                allowed=False,
                reason=DecisionReason.DENIED_BY_RULE,
                matched_rule=rule,
            )

    if granted_by is not None:
        return Decision(
            allowed=True, reason=DecisionReason.GRANTED, matched_rule=granted_by
        )

    return Decision(allowed=False, reason=DecisionReason.NO_MATCHING_RULE)


def has_permission(
    rules: Iterable[RuleLike] | None,
    resource: str,
    action: str,
    is_admin: bool = False,
    deny_overrides: bool = False,
) -> bool:
    """Check if a rule set grants an action on a resource.

    Administrators bypass evaluation entirely. Otherwise access is granted
    only when at least one allowed rule matches both the resource and the
    action; anything else, including empty input, is a denial.

    Args:
        rules: Rules visible to the principal
        resource: The resource to check (e.g., "jurnal")
        action: The action to check (e.g., "view", "delete", "tab:siswa")
        is_admin: Whether the principal holds an administrator role
        deny_overrides: If True, any matching denial wins over grants

    Returns:
        True if access is granted, False otherwise
    """
    return evaluate(rules, resource, action, is_admin, deny_overrides).allowed


def has_any_permission(
    rules: Iterable[RuleLike] | None,
    checks: Iterable[tuple[str, str]],
    is_admin: bool = False,
    deny_overrides: bool = False,
) -> bool:
    """Check if a rule set grants at least one of the (resource, action) pairs.

    An empty list of checks is treated as "nothing required" and passes.
    """
    if is_admin:
        return True

    rule_list = list(rules or ())
    check_list = list(checks)
    if not check_list:
        return True

    return any(
        has_permission(rule_list, resource, action, deny_overrides=deny_overrides)
        for resource, action in check_list
    )


def has_all_permissions(
    rules: Iterable[RuleLike] | None,
    checks: Iterable[tuple[str, str]],
    is_admin: bool = False,
    deny_overrides: bool = False,
) -> bool:
    """Check if a rule set grants every one of the (resource, action) pairs."""
    if is_admin:
        return True

    rule_list = list(rules or ())
    return all(
        has_permission(rule_list, resource, action, deny_overrides=deny_overrides)
        for resource, action in checks
    )


def rules_for_roles(
    rules: Iterable[PermissionRule], roles: Iterable[str]
) -> list[PermissionRule]:
    """Select the rules that apply to a set of roles.

    Role names compare case-insensitively; ``*`` rules apply to everyone.
    """
    wanted = {role.strip().upper() for role in roles if role and role.strip()}
    return [
        rule
        for rule in rules
        if rule.role == WILDCARD or rule.role.strip().upper() in wanted
    ]


def granted_permissions(rules: Iterable[RuleLike]) -> set[str]:
    """Get every permission granted by a rule set.

    Returns:
        Set of permission strings in "resource:action" format
    """
    return {f"{rule.resource}:{rule.action}" for rule in rules if rule.is_allowed}
