"""Terminal output shared by the demo commands."""

from __future__ import annotations

from rich.console import Console
from rich.control import Control

console = Console(highlight=False)


def say(message: str) -> None:
    console.print(message, markup=False)


def overwrite(message: str) -> None:
    """Write ``message`` and move the cursor back to the start of the line."""
    console.print(message, end="", markup=False)
    console.control(Control.move_to_column(0))


def clear_screen() -> None:
    console.clear()
