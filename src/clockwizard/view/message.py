# SPDX-License-Identifier: MIT

from rich.console import Console
from rich.markup import escape

console = Console()
error_console = Console(stderr=True)


def success(message: str) -> None:
    console.print(f"[green]✓[/green] {escape(message)}")


def info(message: str) -> None:
    console.print(f"[cyan]i[/cyan] {escape(message)}")


def warning(message: str) -> None:
    console.print(f"[yellow]![/yellow] {escape(message)}")


def error(message: str) -> None:
    error_console.print(f"[bold red]Error:[/bold red] {escape(message)}")
