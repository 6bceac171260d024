"""Command: sekolah check - Evaluate one access check against a rule file."""

from pathlib import Path

import typer
from rich.console import Console

from sekolah.commands._common import load_or_exit


console = Console()


def check(
    rules_file: Path = typer.Argument(..., help="YAML rule file to evaluate against"),
    resource: str = typer.Argument(..., help="Resource to check (e.g. master.siswa)"),
    action: str = typer.Argument("view", help="Action to check"),
    role: str = typer.Option(
        "", "--role", "-r", help="Role string, e.g. 'GURU,WALI_KELAS'"
    ),
    deny_overrides: bool = typer.Option(
        False, "--deny-overrides", help="Let matching denials win over grants"
    ),
) -> None:
    """Check whether a role set may perform an action on a resource.

    Exits with code 0 when access is allowed and 1 when it is denied.
    """
    from sekolah.config import settings
    from sekolah.core.permissions import evaluate, is_admin, parse_roles, rules_for_roles

    rule_file = load_or_exit(rules_file, console)

    roles = parse_roles(role)
    admin = is_admin(roles, settings.admin_roles)
    rules = rules_for_roles(rule_file.permission_rules(), roles)

    decision = evaluate(
        rules,
        resource,
        action,
        is_admin=admin,
        deny_overrides=deny_overrides or settings.permission_deny_overrides,
    )

    verdict = "[green]ALLOWED[/green]" if decision else "[red]DENIED[/red]"
    console.print(
        f"{verdict} {resource}:{action} for {', '.join(roles) or '(no roles)'} "
        f"[dim]({decision.reason.value})[/dim]"
    )

    if decision.matched_rule is not None:
        rule = decision.matched_rule
        console.print(f"  [dim]matched rule:[/dim] {rule.resource}:{rule.action}")

    if not decision.allowed:
        raise typer.Exit(1)
