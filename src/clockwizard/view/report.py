# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from clockwizard.model.report import (
    DaySummary,
    Gap,
    GroupBy,
    GroupSummary,
    PeriodSummary,
    WeeklyProgress,
)
from clockwizard.model.time_entry import TimeEntry
from clockwizard.parse import format_duration
from clockwizard.service.report import (
    NO_TASK,
    entry_minutes,
    percentage,
    project_name,
)
from clockwizard.time import (
    datetime_to_display_time_str,
    datetime_to_display_time_str_optional,
    to_local,
)

BAND_STYLES = {
    "achieved": ("green", "Weekly target achieved"),
    "close": ("yellow", "Close to the weekly target"),
    "remaining": ("red", "Remaining"),
}


def __truncate(text: str, length: int) -> str:
    if len(text) <= length:
        return text
    return text[: length - 3] + "..."


def __key_value_table() -> Table:
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("property", style="cyan")
    table.add_column("value")
    return table


def day_overview_view(
    total_minutes: int, entry_count: int, running: Optional[TimeEntry], now: pendulum.DateTime
) -> None:
    table = __key_value_table()
    table.add_row("total time", f"[green]{format_duration(total_minutes)}[/green]")
    table.add_row("entries", str(entry_count))
    if running is not None:
        table.add_row(
            "running",
            f"{escape(project_name(running))} "
            f"[magenta]({format_duration(entry_minutes(running, now))})[/magenta]",
        )
    Console().print(table)


def breakdown_view(title: str, groups: list[GroupSummary], total: int) -> None:
    """Minutes per group with their share of the total."""
    console = Console()
    console.print(f"[bold]{title}[/bold]")

    table = Table(box=box.SIMPLE)
    table.add_column("name")
    table.add_column("duration", justify="right")
    table.add_column("share", justify="right")
    table.add_column("entries", justify="right")
    for group in groups:
        table.add_row(
            escape(group["key"]),
            format_duration(group["total_minutes"]),
            f"{percentage(group['total_minutes'], total)}%",
            str(group["entry_count"]),
        )
    console.print(table)


def timeline_view(
    entries: list[TimeEntry], gaps: list[Gap], now: pendulum.DateTime
) -> None:
    console = Console()
    console.print("[bold]Timeline[/bold]")

    table = Table(box=box.SIMPLE)
    table.add_column("time")
    table.add_column("duration", justify="right")
    table.add_column("project")
    table.add_column("task")
    table.add_column("description")
    for entry in entries:
        end = (
            datetime_to_display_time_str(entry["end"])
            if entry["end"] is not None
            else "[magenta]running[/magenta]"
        )
        table.add_row(
            f"{datetime_to_display_time_str(entry['start'])} - {end}",
            format_duration(entry_minutes(entry, now)),
            escape(project_name(entry)),
            escape(entry["task_name"] or NO_TASK),
            escape(__truncate(entry["description"], 40)),
        )
    console.print(table)

    if gaps:
        console.print("[yellow]Time gaps detected:[/yellow]")
        for gap in gaps:
            console.print(
                f"  {datetime_to_display_time_str(gap['start'])} - "
                f"{datetime_to_display_time_str(gap['end'])} "
                f"({format_duration(gap['minutes'])})"
            )
        console.print()


def weekly_summary_view(
    progress: WeeklyProgress, days_worked: int, working_days: int
) -> None:
    table = __key_value_table()
    table.add_row("total time", f"[green]{format_duration(progress['total_minutes'])}[/green]")
    table.add_row("days worked", f"{days_worked} / {working_days}")
    if days_worked > 0:
        table.add_row(
            "average per day",
            format_duration(progress["total_minutes"] // days_worked),
        )
    table.add_row(
        "target progress",
        f"{progress['percentage']}% ({format_duration(progress['total_minutes'])} / "
        f"{format_duration(progress['target_minutes'])})",
    )
    style, label = BAND_STYLES[progress["band"]]
    if progress["band"] == "remaining":
        label = f"{label}: {format_duration(progress['remaining_minutes'])}"
    table.add_row("status", f"[{style}]{label}[/{style}]")
    Console().print(table)


def daily_breakdown_view(days: list[DaySummary]) -> None:
    console = Console()
    console.print("[bold]Daily breakdown[/bold]")

    table = Table(box=box.SIMPLE)
    table.add_column("day")
    table.add_column("date")
    table.add_column("duration", justify="right")
    table.add_column("entries", justify="right")
    table.add_column("first")
    table.add_column("last")
    for day in days:
        style = "" if day["is_working_day"] else "bright_black"
        local_day = to_local(day["date"])
        table.add_row(
            local_day.format("dddd"),
            local_day.format("MMM D"),
            format_duration(day["total_minutes"]) if day["entry_count"] else "-",
            str(day["entry_count"]),
            datetime_to_display_time_str_optional(day["first_start"]),
            datetime_to_display_time_str_optional(day["last_end"]),
            style=style,
        )
    console.print(table)


def report_info_view(
    start: pendulum.DateTime,
    end: pendulum.DateTime,
    group_by: GroupBy,
    project_filter: Optional[str],
) -> None:
    table = __key_value_table()
    table.add_row(
        "period",
        f"{to_local(start).format('MMM D, YYYY')} - {to_local(end).format('MMM D, YYYY')}",
    )
    table.add_row("grouped by", group_by)
    if project_filter:
        table.add_row("project filter", escape(project_filter))
    Console().print(table)


def report_table_view(groups: list[GroupSummary], group_by: GroupBy, total: int) -> None:
    table = Table(box=box.SIMPLE)
    table.add_column(group_by)
    table.add_column("duration", justify="right")
    table.add_column("share", justify="right")
    table.add_column("entries", justify="right")
    match group_by:
        case "project":
            table.add_column("tasks", justify="right")
        case "date":
            table.add_column("projects", justify="right")
            table.add_column("first")
            table.add_column("last")

    for group in groups:
        row = [
            escape(group["key"]),
            format_duration(group["total_minutes"]),
            f"{percentage(group['total_minutes'], total)}%",
            str(group["entry_count"]),
        ]
        match group_by:
            case "project":
                row.append(str(len(group["task_minutes"])))
            case "date":
                row += [
                    str(len(group["project_minutes"])),
                    datetime_to_display_time_str(group["first_start"]),
                    datetime_to_display_time_str(group["last_end"]),
                ]
        table.add_row(*row)

    Console().print(table)


def period_summary_view(summary: PeriodSummary) -> None:
    console = Console()
    console.print("[bold]Summary[/bold]")
    table = __key_value_table()
    table.add_row("total time", f"[green]{format_duration(summary['total_minutes'])}[/green]")
    table.add_row("total entries", str(summary["entry_count"]))
    table.add_row("days in period", str(summary["days_in_period"]))
    table.add_row("average per day", format_duration(summary["average_minutes_per_day"]))
    table.add_row("projects worked on", str(summary["project_count"]))
    table.add_row("tasks worked on", str(summary["task_count"]))
    console.print(table)
