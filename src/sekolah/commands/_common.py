"""Helpers shared by the CLI commands."""

from pathlib import Path

import typer
from rich.console import Console

from sekolah.rulefile import RuleFile, load_rule_file


def load_or_exit(path: Path, console: Console) -> RuleFile:
    """Load a rule file, printing the error and exiting with code 2 on failure."""
    try:
        return load_rule_file(path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2) from e


def yes_no(value: bool) -> str:
    return "[green]yes[/green]" if value else "[red]no[/red]"
