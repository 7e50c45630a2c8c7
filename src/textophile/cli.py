"""Command line entry point for the demo commands."""

from __future__ import annotations

from typing import Any, Optional

import typer
from rich.console import Console

from .demo import LoginCommand, ShellArgs, ShellCommand, StackCommand
from .logging_utils import configure_logging
from .types import InitError, Sentinel

console = Console()

app = typer.Typer(
    name="textophile",
    help="Interactive prompt demos.",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override TEXTOPHILE_LOG_LEVEL"),
) -> None:
    configure_logging(profile="cli", level=log_level)


def _finish(result: Any) -> None:
    """Report a session result; sentinel and init failures exit with status 1."""
    if result is Sentinel.TIMEOUT:
        console.print("[yellow]Session timed out.[/yellow]")
        raise typer.Exit(1)
    if result is Sentinel.COMMAND_ERROR:
        console.print("[bold red]Error:[/bold red] could not read input.")
        raise typer.Exit(1)
    if isinstance(result, InitError):
        console.print(f"[bold red]Error:[/bold red] session did not start: {result.reason}")
        raise typer.Exit(1)


@app.command()
def stack(items: Optional[list[str]] = typer.Argument(None, help="Initial stack, top first")) -> None:
    """Push and pop strings on a stack."""
    _finish(StackCommand.run(items or []))


@app.command()
def login() -> None:
    """Log in with a username and a hidden password."""
    result = LoginCommand.run()
    _finish(result)
    console.print(f"Logged in as [bold]{result.name}[/bold]")


@app.command()
def shell(
    restart: bool = typer.Option(False, "--restart/--once", help="Start over at the login prompt after exit"),
) -> None:
    """Log in and run a counting shell."""
    _finish(ShellCommand.run(ShellArgs(restart=restart)))


if __name__ == "__main__":
    app()
