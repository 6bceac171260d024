"""Command: sekolah explain - Show how each rule relates to an access check."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from sekolah.commands._common import load_or_exit, yes_no


console = Console()


def explain(
    rules_file: Path = typer.Argument(..., help="YAML rule file to evaluate against"),
    resource: str = typer.Argument(..., help="Resource to check"),
    action: str = typer.Argument("view", help="Action to check"),
    role: str = typer.Option(
        "", "--role", "-r", help="Role string, e.g. 'GURU,WALI_KELAS'"
    ),
    all_rules: bool = typer.Option(
        False, "--all", "-a", help="Include rules for roles the user does not hold"
    ),
) -> None:
    """Explain an access decision rule by rule."""
    from sekolah.config import settings
    from sekolah.core.permissions import (
        evaluate,
        is_admin,
        match_action,
        match_resource,
        parse_roles,
        rules_for_roles,
    )

    rule_file = load_or_exit(rules_file, console)

    roles = parse_roles(role)
    admin = is_admin(roles, settings.admin_roles)
    every_rule = rule_file.permission_rules()
    applicable = rules_for_roles(every_rule, roles)

    table = Table(title=f"Rules for {resource}:{action}")
    table.add_column("Role", style="cyan")
    table.add_column("Resource")
    table.add_column("Action")
    table.add_column("Allowed")
    table.add_column("Applies")
    table.add_column("Resource match")
    table.add_column("Action match")

    for rule in every_rule if all_rules else applicable:
        table.add_row(
            rule.role,
            rule.resource,
            rule.action,
            yes_no(rule.is_allowed),
            yes_no(rule in applicable),
            yes_no(match_resource(resource, rule.resource)),
            yes_no(match_action(action, rule.action)),
        )

    console.print(table)

    decision = evaluate(
        applicable,
        resource,
        action,
        is_admin=admin,
        deny_overrides=settings.permission_deny_overrides,
    )
    verdict = "[green]ALLOWED[/green]" if decision else "[red]DENIED[/red]"
    console.print(f"\nRoles: {', '.join(roles) or '(none)'}  Admin: {yes_no(admin)}")
    console.print(f"Decision: {verdict} [dim]({decision.reason.value})[/dim]")
