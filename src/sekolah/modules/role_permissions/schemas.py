"""Pydantic schemas for role and rule administration."""

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from sekolah.core.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_PERMISSION_ACTION_LENGTH,
    MAX_PERMISSION_RESOURCE_LENGTH,
    MAX_ROLE_NAME_LENGTH,
    ROLE_DELIMITER_PATTERN,
)
from sekolah.core.permissions.roles import format_role_display


def _normalize_role_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Role name must not be blank")
    # Must survive parse_roles unchanged
    if re.search(ROLE_DELIMITER_PATTERN, value):
        raise ValueError("Role name must not contain ',' or '|'")
    return value.upper()


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Value must not be blank")
    return value


# ============================================================
# Rules
# ============================================================


class RolePermissionUpsert(BaseModel):
    """Schema for saving a rule; keyed on (role_name, resource, action)."""

    role_name: str = Field(..., min_length=1, max_length=MAX_ROLE_NAME_LENGTH)
    resource: str = Field(..., min_length=1, max_length=MAX_PERMISSION_RESOURCE_LENGTH)
    action: str = Field(..., min_length=1, max_length=MAX_PERMISSION_ACTION_LENGTH)
    is_allowed: bool = True

    @field_validator("role_name")
    @classmethod
    def normalize_role_name(cls, v: str) -> str:
        """Upper-case role names so they line up with parsed user roles."""
        return _normalize_role_name(v)

    @field_validator("resource", "action")
    @classmethod
    def strip_identifier(cls, v: str) -> str:
        return _strip_required(v)


class RolePermissionResponse(BaseModel):
    """Schema for rule response data."""

    id: UUID
    role_name: str
    resource: str
    action: str
    is_allowed: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RuleSummary(BaseModel):
    """The fields of a rule the evaluator looks at."""

    role_name: str
    resource: str
    action: str
    is_allowed: bool

    model_config = ConfigDict(from_attributes=True)


# ============================================================
# Roles and catalog
# ============================================================


class RoleCreate(BaseModel):
    """Schema for creating a role."""

    name: str = Field(..., min_length=1, max_length=MAX_ROLE_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    is_default: bool = False

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return _normalize_role_name(v)


class RoleResponse(BaseModel):
    """Schema for role response data."""

    id: UUID
    name: str
    description: str | None = None
    is_default: bool

    model_config = ConfigDict(from_attributes=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def label(self) -> str:
        return format_role_display(self.name)


class PermissionCatalogResponse(BaseModel):
    """Schema for a permission catalog entry."""

    id: UUID
    resource: str
    action: str
    label: str
    category: str
    description: str | None = None

    model_config = ConfigDict(from_attributes=True)


class RolePermissionOverview(BaseModel):
    """Everything the role permission screen needs in one response."""

    permissions: list[RolePermissionResponse]
    roles: list[RoleResponse]
    catalog: list[PermissionCatalogResponse]


# ============================================================
# Access checks
# ============================================================


class AccessCheckRequest(BaseModel):
    """Schema for evaluating an access check.

    ``roles`` evaluates on behalf of another role set and is reserved
    for administrators.
    """

    resource: str = Field(..., min_length=1, max_length=MAX_PERMISSION_RESOURCE_LENGTH)
    action: str = Field(..., min_length=1, max_length=MAX_PERMISSION_ACTION_LENGTH)
    roles: list[str] | None = None

    @field_validator("resource", "action")
    @classmethod
    def strip_identifier(cls, v: str) -> str:
        return _strip_required(v)


class AccessCheckResponse(BaseModel):
    """Outcome of an access check."""

    resource: str
    action: str
    roles: list[str]
    is_admin: bool
    allowed: bool
    reason: str
    matched_rule: RuleSummary | None = None
