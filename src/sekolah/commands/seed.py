"""Command: sekolah seed - Load roles, catalog and rules into the database."""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from sqlalchemy.ext.asyncio import AsyncSession

from sekolah.commands._common import load_or_exit
from sekolah.rulefile import RuleFile, get_default_rule_file_path


console = Console()


async def apply_rule_file(
    session: AsyncSession, rule_file: RuleFile, reset: bool = False
) -> dict[str, int]:
    """Write a rule file into the database.

    Roles are created when missing; catalog entries and rules are
    upserted on their natural keys, so seeding twice is harmless.

    Args:
        session: Open session; the caller commits
        rule_file: Parsed rule file
        reset: Delete every stored rule first

    Returns:
        Counts of what was written
    """
    from sekolah.modules.role_permissions.models import Role
    from sekolah.modules.role_permissions.repos import (
        PermissionCatalogRepository,
        RolePermissionRepository,
        RoleRepository,
    )

    rules = RolePermissionRepository(session)
    roles = RoleRepository(session)
    catalog = PermissionCatalogRepository(session)

    counts = {"deleted": 0, "roles": 0, "catalog": 0, "created": 0, "updated": 0}

    if reset:
        counts["deleted"] = await rules.delete_all()

    for spec in rule_file.roles:
        if await roles.get_by_name(spec.name) is None:
            await roles.create(
                Role(
                    name=spec.name,
                    description=spec.description,
                    is_default=spec.is_default,
                )
            )
            counts["roles"] += 1

    for entry in rule_file.catalog:
        await catalog.upsert(
            resource=entry.resource,
            action=entry.action,
            label=entry.label,
            category=entry.category,
            description=entry.description,
        )
        counts["catalog"] += 1

    for rule in rule_file.permission_rules():
        _, created = await rules.upsert(
            role_name=rule.role,
            resource=rule.resource,
            action=rule.action,
            is_allowed=rule.is_allowed,
        )
        counts["created" if created else "updated"] += 1

    return counts


async def _seed(rule_file: RuleFile, reset: bool) -> dict[str, int]:
    from sekolah.core.database import async_engine, async_session_factory

    try:
        async with async_session_factory() as session:
            counts = await apply_rule_file(session, rule_file, reset=reset)
            await session.commit()
    finally:
        await async_engine.dispose()
    return counts


def seed(
    file: Path | None = typer.Option(
        None, "--file", "-f", help="Rule file to load (defaults to the bundled one)"
    ),
    reset: bool = typer.Option(
        False, "--reset", help="Delete all stored rules before loading"
    ),
) -> None:
    """Seed roles, the permission catalog and rules."""
    path = file or get_default_rule_file_path()
    rule_file = load_or_exit(path, console)

    if reset:
        confirm = typer.confirm("This deletes every stored rule first. Continue?")
        if not confirm:
            console.print("[yellow]Cancelled.[/yellow]")
            raise typer.Exit(0)

    console.print(f"\n[bold cyan]Seeding from:[/bold cyan] {path}\n")

    try:
        counts = asyncio.run(_seed(rule_file, reset))
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    if reset:
        console.print(f"[yellow]-[/yellow] Deleted {counts['deleted']} rules")
    console.print(f"[green]✓[/green] Roles created: {counts['roles']}")
    console.print(f"[green]✓[/green] Catalog entries: {counts['catalog']}")
    console.print(
        f"[green]✓[/green] Rules created: {counts['created']}, "
        f"updated: {counts['updated']}"
    )
