"""Main sekolah CLI application."""

import typer
from rich.console import Console

from sekolah import __version__
from sekolah.commands import check, explain, roles, seed


console = Console()

app = typer.Typer(
    name="sekolah",
    help="Inspect and seed role permissions.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register commands
app.command(name="check")(check.check)
app.command(name="explain")(explain.explain)
app.command(name="roles")(roles.roles)
app.command(name="seed")(seed.seed)


@app.callback(invoke_without_command=True)
def version_callback(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit."
    ),
) -> None:
    """Sekolah CLI - Inspect and seed role permissions."""
    if version:
        console.print(f"[bold cyan]sekolah[/bold cyan] version {__version__}")
        raise typer.Exit()


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
