"""Repositories for roles, the permission catalog and rules."""

from collections.abc import Iterable
from typing import Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import delete, select

from sekolah.api.dependencies import DBSession
from sekolah.core.constants import WILDCARD
from sekolah.modules.role_permissions.models import Permission, Role, RolePermission


class RolePermissionRepository:
    """Repository for RolePermission rules.

    This is the rule storage the request guard reads from.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def list_all(self) -> list[RolePermission]:
        """Get every rule, ordered by role, resource and action."""
        stmt = select(RolePermission).order_by(
            RolePermission.role_name,
            RolePermission.resource,
            RolePermission.action,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_roles(self, role_names: Iterable[str]) -> list[RolePermission]:
        """Get the rules that apply to a set of roles.

        Includes rules stored for the ``*`` role.

        Args:
            role_names: Role names; compared upper-cased

        Returns:
            Matching rules
        """
        names = {name.strip().upper() for name in role_names if name and name.strip()}
        names.add(WILDCARD)

        stmt = (
            select(RolePermission)
            .where(RolePermission.role_name.in_(sorted(names)))
            .order_by(RolePermission.role_name, RolePermission.resource)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, rule_id: UUID) -> RolePermission | None:
        result = await self.session.execute(
            select(RolePermission).where(RolePermission.id == rule_id)
        )
        return result.scalar_one_or_none()

    async def get_by_key(
        self, role_name: str, resource: str, action: str
    ) -> RolePermission | None:
        """Get the rule stored for a (role, resource, action) composite."""
        stmt = select(RolePermission).where(
            RolePermission.role_name == role_name,
            RolePermission.resource == resource,
            RolePermission.action == action,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(
        self,
        role_name: str,
        resource: str,
        action: str,
        is_allowed: bool,
    ) -> tuple[RolePermission, bool]:
        """Create or update the rule for a (role, resource, action) composite.

        Returns:
            Tuple of (rule, created)
        """
        rule = await self.get_by_key(role_name, resource, action)
        created = rule is None

        if rule is None:
            rule = RolePermission(
                role_name=role_name,
                resource=resource,
                action=action,
                is_allowed=is_allowed,
            )
            self.session.add(rule)
        else:
            rule.is_allowed = is_allowed

        await self.session.flush()
        await self.session.refresh(rule)
        return rule, created

    async def delete(self, rule: RolePermission) -> None:
        await self.session.delete(rule)
        await self.session.flush()

    async def delete_all(self) -> int:
        """Delete every rule.

        Returns:
            Number of rules deleted
        """
        result = await self.session.execute(delete(RolePermission))
        await self.session.flush()
        return result.rowcount or 0


class RoleRepository:
    """Repository for Role records."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def list_all(self) -> list[Role]:
        result = await self.session.execute(select(Role).order_by(Role.name))
        return list(result.scalars().all())

    async def get_by_name(self, name: str) -> Role | None:
        result = await self.session.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()

    async def create(self, role: Role) -> Role:
        self.session.add(role)
        await self.session.flush()
        await self.session.refresh(role)
        return role


class PermissionCatalogRepository:
    """Repository for Permission catalog entries."""

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def list_all(self) -> list[Permission]:
        """Get the catalog ordered the way the admin screen groups it."""
        stmt = select(Permission).order_by(Permission.category, Permission.label)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_key(self, resource: str, action: str) -> Permission | None:
        stmt = select(Permission).where(
            Permission.resource == resource,
            Permission.action == action,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(
        self,
        resource: str,
        action: str,
        label: str,
        category: str,
        description: str | None = None,
    ) -> Permission:
        """Create or update the catalog entry for a resource/action pair."""
        entry = await self.get_by_key(resource, action)
        if entry is None:
            entry = Permission(resource=resource, action=action)
            self.session.add(entry)

        entry.label = label
        entry.category = category
        entry.description = description

        await self.session.flush()
        return entry


# Type aliases for dependency injection
RolePermissionRepo = Annotated[
    RolePermissionRepository, Depends(RolePermissionRepository)
]
RoleRepo = Annotated[RoleRepository, Depends(RoleRepository)]
PermissionCatalogRepo = Annotated[
    PermissionCatalogRepository, Depends(PermissionCatalogRepository)
]
