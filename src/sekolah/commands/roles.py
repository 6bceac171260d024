"""Command: sekolah roles - Show how a stored role string is parsed."""

import typer
from rich.console import Console
from rich.table import Table

from sekolah.commands._common import yes_no


console = Console()


def roles(
    raw: str = typer.Argument(..., help="Role string as stored on the user"),
) -> None:
    """Parse a role string and show the normalized roles."""
    from sekolah.config import settings
    from sekolah.core.permissions import format_role_display, is_admin, parse_roles

    parsed = parse_roles(raw)

    if not parsed:
        console.print("[yellow]No roles found.[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Roles")
    table.add_column("Role", style="cyan")
    table.add_column("Label")
    table.add_column("Admin")

    for name in parsed:
        table.add_row(
            name,
            format_role_display(name),
            yes_no(is_admin([name], settings.admin_roles)),
        )

    console.print(table)
    console.print(f"\nAdministrator: {yes_no(is_admin(parsed, settings.admin_roles))}")
