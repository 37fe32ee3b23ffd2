# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Any, TypedDict

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from clockwizard.configuration import Configuration
from clockwizard.model.repository_info import RepositoryInfo

CONFIGURED = "[green]✓ Configured[/green]"
NOT_SET = "[red]Not set[/red]"


class ConnectionCheck(TypedDict):
    name: str
    configured: bool
    connected: bool


def __key_value_table() -> Table:
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("property", style="cyan")
    table.add_column("value")
    return table


def __is_set(value: Any) -> str:
    return CONFIGURED if value else NOT_SET


def configuration_view(config: Configuration, path: Path, detailed: bool = False) -> None:
    console = Console()
    console.print("[bold]Configuration[/bold]")

    table = __key_value_table()
    clockify = config["clockify"]
    table.add_row("clockify api key", __is_set(clockify["api_key"]))
    table.add_row("clockify workspace", __is_set(clockify["workspace_id"]))
    if detailed and clockify["workspace_id"]:
        table.add_row("workspace id", clockify["workspace_id"])
        table.add_row("user id", clockify["user_id"] or "Unknown")

    jira = config["jira"]
    if jira["url"]:
        table.add_row("jira url", escape(jira["url"]))
        table.add_row("jira email", __is_set(jira["email"]))
        table.add_row("jira token", __is_set(jira["token"]))
    else:
        table.add_row("jira", "[yellow]Not configured[/yellow]")

    if detailed:
        timer = config["timer"]
        table.add_row("default duration", timer["default_duration"])
        table.add_row("round to minutes", str(timer["round_to_minutes"]))
        table.add_row("auto-detect branch", "Yes" if timer["auto_detect_branch"] else "No")
        table.add_row("default description", escape(timer["default_description"]))
        table.add_row("log level", config["log_level"])
        table.add_row("config file", str(path))
    console.print(table)


def mappings_view(mappings: dict[str, str]) -> None:
    console = Console()
    console.print("[bold]Project mappings[/bold]")
    if not mappings:
        console.print("  [yellow]None configured[/yellow]")
        console.print()
        return

    table = Table(box=box.SIMPLE)
    table.add_column("jira project", style="cyan")
    table.add_column("clockify project", style="green")
    for project_key, project_id in sorted(mappings.items()):
        table.add_row(project_key, project_id)
    console.print(table)


def timezone_view(info: dict[str, Any], local_time: str) -> None:
    table = __key_value_table()
    table.add_row("timezone", f"{info['name']} ({info['abbreviation']}, UTC{info['offset']})")
    table.add_row("daylight saving", "Yes" if info["is_dst"] else "No")
    table.add_row("local time", local_time)
    Console().print(table)


def git_view(info: RepositoryInfo) -> None:
    console = Console()
    console.print("[bold]Git[/bold]")
    table = __key_value_table()
    branch = info["branch"]
    table.add_row("branch", escape(branch) if branch else "[bright_black]detached[/bright_black]")
    table.add_row("commit", info["commit"] or "-")
    table.add_row(
        "changes",
        "[yellow]Uncommitted changes[/yellow]" if info["has_changes"] else "[green]Clean[/green]",
    )
    if info["remote"]:
        table.add_row("remote", escape(info["remote"]))
    table.add_row(
        "ticket",
        f"[green]{info['ticket_id']}[/green]"
        if info["ticket_id"]
        else "[bright_black]No ticket detected in branch name[/bright_black]",
    )
    console.print(table)


def connections_view(checks: list[ConnectionCheck]) -> None:
    console = Console()
    console.print("[bold]Connections[/bold]")
    table = __key_value_table()
    for check in checks:
        if not check["configured"]:
            table.add_row(check["name"], "[yellow]Not configured[/yellow]")
        elif check["connected"]:
            table.add_row(check["name"], "[green]✓ Connected[/green]")
        else:
            table.add_row(check["name"], "[red]✗ Connection failed[/red]")
    console.print(table)
