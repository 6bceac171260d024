"""Helpers for building users, rules and tokens in tests."""

from sqlalchemy.ext.asyncio import AsyncSession

from sekolah.core.auth.backend import create_access_token
from sekolah.modules.role_permissions.models import RolePermission
from sekolah.modules.users.models import User
from tests.factories import RolePermissionFactory, UserFactory


async def make_user(db: AsyncSession, role: str, **kwargs) -> User:
    """Persist a user holding the given role string."""
    user = UserFactory.build(role=role, **kwargs)
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def make_rule(
    db: AsyncSession,
    role_name: str,
    resource: str,
    action: str,
    is_allowed: bool = True,
) -> RolePermission:
    """Persist a permission rule."""
    rule = RolePermissionFactory.build(
        role_name=role_name,
        resource=resource,
        action=action,
        is_allowed=is_allowed,
    )
    db.add(rule)
    await db.flush()
    await db.refresh(rule)
    return rule


def bearer(user: User) -> dict[str, str]:
    """Authorization headers for a user."""
    token = create_access_token(user.auth_id)
    return {"Authorization": f"Bearer {token}"}
