"""Pydantic schemas for user operations."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sekolah.core.constants import MAX_ROLE_STRING_LENGTH
from sekolah.core.permissions.roles import parse_roles
from sekolah.modules.role_permissions.schemas import RuleSummary


class UserResponse(BaseModel):
    """Schema for user response data."""

    id: UUID
    auth_id: str
    email: str
    full_name: str
    role: str
    roles: list[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserListResponse(BaseModel):
    """Schema for listing users."""

    items: list[UserResponse]
    total: int
    page: int
    page_size: int


class UserRolesUpdate(BaseModel):
    """Schema for replacing a user's roles."""

    roles: list[str] = Field(default_factory=list)

    @field_validator("roles")
    @classmethod
    def normalize_roles(cls, v: list[str]) -> list[str]:
        """Normalize through the same parser used for stored role strings."""
        roles = parse_roles(",".join(v))
        if len(",".join(roles)) > MAX_ROLE_STRING_LENGTH:
            raise ValueError(
                f"Roles must fit in {MAX_ROLE_STRING_LENGTH} characters when joined"
            )
        return roles


class MeResponse(BaseModel):
    """The current principal and what they may do.

    ``rules`` lets clients hide controls locally with the same matching
    semantics the server enforces.
    """

    user: UserResponse
    roles: list[str]
    role_labels: list[str]
    is_admin: bool
    permissions: list[str]
    rules: list[RuleSummary]
