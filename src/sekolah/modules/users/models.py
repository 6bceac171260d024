"""User database models."""

from sqlalchemy import Boolean, String, true
from sqlalchemy.orm import Mapped, mapped_column

from sekolah.core.constants import (
    MAX_AUTH_ID_LENGTH,
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_ROLE_STRING_LENGTH,
)
from sekolah.core.database.base import Base, TimestampMixin, UUIDMixin
from sekolah.core.permissions.roles import parse_roles


class User(Base, UUIDMixin, TimestampMixin):
    """A staff member or student account.

    Credentials live with the external identity provider; this table
    links the provider's subject to the school's role assignment.

    Attributes:
        auth_id: Subject id issued by the identity provider
        email: Contact email
        full_name: Display name
        role: Raw role string, e.g. "GURU,WALI_KELAS" or "GURU|KAMAD"
        is_active: Whether the user may use the application
    """

    __tablename__ = "users"

    auth_id: Mapped[str] = mapped_column(
        String(MAX_AUTH_ID_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    email: Mapped[str] = mapped_column(
        String(MAX_EMAIL_LENGTH),
        nullable=False,
        index=True,
    )
    full_name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
    )
    role: Mapped[str] = mapped_column(
        String(MAX_ROLE_STRING_LENGTH),
        default="",
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        server_default=true(),
        nullable=False,
    )

    @property
    def roles(self) -> list[str]:
        """Normalized role names parsed from ``role``."""
        return parse_roles(self.role)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role!r})>"
