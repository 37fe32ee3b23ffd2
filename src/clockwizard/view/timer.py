# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum
from rich import box
from rich.console import Console
from rich.table import Table

from clockwizard.model.project import Project, Task
from clockwizard.model.time_entry import TimeEntry
from clockwizard.model.timer import TimerState, TimerStatus
from clockwizard.parse import format_duration, interval_minutes
from clockwizard.service.report import project_name
from clockwizard.time import (
    datetime_to_display_time_str,
    datetime_to_display_time_str_optional,
    now_utc,
    to_local,
)

STATE_LABELS = {
    TimerState.NO_TIMER: "[bright_black]no timer[/bright_black]",
    TimerState.RUNNING_REMOTE: "[green]running[/green]",
    TimerState.RUNNING_LOCAL_ONLY: "[yellow]running (local data only)[/yellow]",
    TimerState.RECONCILED: "[cyan]running (local data updated)[/cyan]",
}


def __entry_table(entry: TimeEntry) -> Table:
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("property", style="cyan")
    table.add_column("value")
    table.add_row("project", project_name(entry))
    if entry["task_name"]:
        table.add_row("task", entry["task_name"])
    if entry["description"]:
        table.add_row("description", entry["description"])
    return table


def active_timer_view(status: TimerStatus, now: Optional[pendulum.DateTime] = None) -> None:
    entry = status["entry"]
    console = Console()
    if entry is None:
        console.print("[bright_black]No active timer[/bright_black]")
        return

    current = now if now is not None else now_utc()
    table = __entry_table(entry)
    table.add_row(
        "started",
        f"{datetime_to_display_time_str(entry['start'])} "
        f"({to_local(entry['start']).diff_for_humans()})",
    )
    table.add_row(
        "elapsed",
        f"[magenta]{format_duration(interval_minutes(entry, current))}[/magenta]",
    )
    table.add_row("state", STATE_LABELS[status["state"]])
    console.print(table)


def start_summary_view(
    project: Project, task: Optional[Task], description: Optional[str]
) -> None:
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("property", style="cyan")
    table.add_column("value")
    table.add_row("project", project["name"])
    table.add_row("task", task["name"] if task is not None else "-")
    table.add_row("description", description or "-")
    Console().print(table)


def started_view(entry: TimeEntry) -> None:
    table = __entry_table(entry)
    table.add_row("started", datetime_to_display_time_str(entry["start"]))
    table.add_row("entry id", f"[bright_black]{entry['id']}[/bright_black]")
    Console().print(table)


def stopped_view(entry: TimeEntry) -> None:
    table = __entry_table(entry)
    table.add_row("started", datetime_to_display_time_str(entry["start"]))
    table.add_row("stopped", datetime_to_display_time_str_optional(entry["end"]))
    table.add_row("total", f"[green]{format_duration(interval_minutes(entry))}[/green]")
    table.add_row("entry id", f"[bright_black]{entry['id']}[/bright_black]")
    Console().print(table)


def logged_entry_view(entry: TimeEntry) -> None:
    table = __entry_table(entry)
    table.add_row(
        "time",
        f"{datetime_to_display_time_str(entry['start'])} - "
        f"{datetime_to_display_time_str_optional(entry['end'])}",
    )
    table.add_row("duration", f"[green]{format_duration(interval_minutes(entry))}[/green]")
    table.add_row("entry id", f"[bright_black]{entry['id']}[/bright_black]")
    Console().print(table)
