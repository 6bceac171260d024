"""Permission system database models.

- Role: a named group of users (GURU, WALI_KELAS, ...)
- Permission: catalog entry describing a resource/action pair the
  administration screen can toggle
- RolePermission: a rule granting or denying an action on a resource
  to a role; this is what the evaluator consumes
"""

from sqlalchemy import Boolean, String, UniqueConstraint, false, true
from sqlalchemy.orm import Mapped, mapped_column

from sekolah.core.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PERMISSION_ACTION_LENGTH,
    MAX_PERMISSION_CATEGORY_LENGTH,
    MAX_PERMISSION_RESOURCE_LENGTH,
    MAX_ROLE_NAME_LENGTH,
)
from sekolah.core.database.base import Base, TimestampMixin, UUIDMixin


class Role(Base, UUIDMixin, TimestampMixin):
    """Role model.

    Roles carry no hierarchy; a user holding several roles gets the
    union of their grants.

    Attributes:
        name: Upper-case role name (e.g., "GURU", "WALI_KELAS")
        description: Human-readable description
        is_default: Whether new users receive this role
    """

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(
        String(MAX_ROLE_NAME_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )
    is_default: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        server_default=false(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Role(name={self.name})>"


class Permission(Base, UUIDMixin, TimestampMixin):
    """Catalog entry for a resource/action pair.

    Examples:
        - resource="jurnal", action="view", category="HALAMAN"
        - resource="master", action="tab:siswa", category="MASTER DATA"
    """

    __tablename__ = "permissions"
    __table_args__ = (
        UniqueConstraint("resource", "action", name="uq_permission_resource_action"),
    )

    resource: Mapped[str] = mapped_column(
        String(MAX_PERMISSION_RESOURCE_LENGTH),
        nullable=False,
        index=True,
    )
    action: Mapped[str] = mapped_column(
        String(MAX_PERMISSION_ACTION_LENGTH),
        nullable=False,
    )
    label: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    category: Mapped[str] = mapped_column(
        String(MAX_PERMISSION_CATEGORY_LENGTH),
        nullable=False,
        default="HALAMAN",
    )
    description: Mapped[str | None] = mapped_column(
        String(MAX_DESCRIPTION_LENGTH),
        nullable=True,
    )

    @property
    def name(self) -> str:
        """Return the permission name as 'resource:action'."""
        return f"{self.resource}:{self.action}"

    def __repr__(self) -> str:
        return f"<Permission({self.resource}:{self.action})>"


class RolePermission(Base, UUIDMixin, TimestampMixin):
    """A grant or denial of an action on a resource for a role.

    ``role_name``, ``resource`` and ``action`` may each be ``*``. The
    composite of the three is unique, so saving a rule is an upsert.
    """

    __tablename__ = "role_permissions"
    __table_args__ = (
        UniqueConstraint(
            "role_name", "resource", "action", name="uq_role_permission_rule"
        ),
    )

    role_name: Mapped[str] = mapped_column(
        String(MAX_ROLE_NAME_LENGTH),
        nullable=False,
        index=True,
    )
    resource: Mapped[str] = mapped_column(
        String(MAX_PERMISSION_RESOURCE_LENGTH),
        nullable=False,
    )
    action: Mapped[str] = mapped_column(
        String(MAX_PERMISSION_ACTION_LENGTH),
        nullable=False,
    )
    is_allowed: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default=true(),
        nullable=False,
    )

    @property
    def role(self) -> str:
        return self.role_name

    def __repr__(self) -> str:
        state = "allow" if self.is_allowed else "deny"
        return f"<RolePermission({self.role_name} {self.resource}:{self.action} {state})>"
