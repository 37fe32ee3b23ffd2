# SPDX-License-Identifier: MIT

import sys
from typing import Optional

import click
import typer
from rich.console import Console

from clockwizard import state as app_state

console = Console()


def is_interactive() -> bool:
    return not app_state.get_assume_yes() and sys.stdin.isatty()


def confirm(message: str, default: bool = True) -> bool:
    """Ask a yes/no question. --yes answers yes, other non-interactive runs take the default."""
    if app_state.get_assume_yes():
        return True
    if not sys.stdin.isatty():
        return default
    return typer.confirm(message, default=default)


def choose(message: str, options: list[str]) -> Optional[int]:
    """Pick one of options by number. Returns None when nobody can answer."""
    if not options or not is_interactive():
        return None
    console.print(f"[bold]{message}[/bold]")
    for number, option in enumerate(options, start=1):
        console.print(f"  [cyan]{number:>3}[/cyan]  {option}")
    selected = typer.prompt("Choice", type=click.IntRange(1, len(options)))
    return int(selected) - 1


def ask(
    message: str, default: Optional[str] = None, hide_input: bool = False
) -> Optional[str]:
    if not is_interactive():
        return default
    answer = typer.prompt(
        message,
        default=default if default is not None else "",
        hide_input=hide_input,
        show_default=not hide_input and bool(default),
    )
    return str(answer).strip() or None
