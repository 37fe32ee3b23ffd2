# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console

from clockwizard.errors import InvalidFormat, NotFound
from clockwizard.model.time_entry import NewTimeEntry, TimeInterval
from clockwizard.parse import (
    duration_suggestions,
    format_duration,
    interval_from_clock_times,
    interval_from_duration,
    interval_from_log_options,
    interval_minutes,
    smart_start_suggestions,
)
from clockwizard.repository.catalog import CatalogRepository
from clockwizard.terminal import prompt
from clockwizard.terminal.common import (
    clockify_client,
    detect_ticket,
    jira_client,
    resolve_work,
    select_ticket,
)
from clockwizard.time import datetime_to_display_time_str, now_utc
from clockwizard.view import message
from clockwizard.view.header import header
from clockwizard.view.task import ticket_view
from clockwizard.view.timer import logged_entry_view, start_summary_view


def __ask_interval() -> TimeInterval:
    console = Console()
    now = now_utc()
    suggestions = smart_start_suggestions(now)

    console.print("[bold]Common durations[/bold]")
    for duration, label in duration_suggestions().items():
        console.print(f"  [cyan]{duration:>6}[/cyan]  {label}")
    console.print()

    methods = ["Enter duration (e.g. 2h, 1h30m)", "Specify start and end times"]
    if suggestions:
        methods.append("Use a suggestion based on the current time")

    method = prompt.choose("How would you like to specify time?", methods)
    match method:
        case 0:
            duration = prompt.ask("Duration")
            if not duration:
                raise InvalidFormat("No duration given")
            return interval_from_duration(duration, now)
        case 1:
            start = prompt.ask("Start time (e.g. 9:30am)")
            end = prompt.ask("End time (e.g. 11:30am or now)", default="now")
            if not start or not end:
                raise InvalidFormat("Start and end times are required")
            return interval_from_clock_times(start, end, now)
        case 2:
            index = prompt.choose(
                "Select suggestion",
                [f"{s['duration']} - {s['label']}" for s in suggestions],
            )
            if index is None:
                raise InvalidFormat("No suggestion selected")
            return {"start": suggestions[index]["start"], "end": now}
    raise InvalidFormat("Give a duration or --start and --end times")


def log(
    duration: Annotated[
        Optional[str],
        typer.Argument(help="Duration to log, e.g. 2h, 1h30m, 90m, 1.5h"),
    ] = None,
    ticket: Annotated[
        Optional[str],
        typer.Option("--task", "-t", help="Jira ticket id, e.g. CAM-451"),
    ] = None,
    project: Annotated[
        Optional[str],
        typer.Option("--project", "-p", help="Clockify project id or name"),
    ] = None,
    description: Annotated[
        Optional[str],
        typer.Option("--description", "-d", help="Time entry description"),
    ] = None,
    start: Annotated[
        Optional[str],
        typer.Option("--start", "-s", help="Start time, e.g. 9:30am or 14:30"),
    ] = None,
    end: Annotated[
        Optional[str],
        typer.Option("--end", "-e", help="End time, e.g. 11:30am, 16:30 or now"),
    ] = None,
    auto: Annotated[
        bool,
        typer.Option("--auto", "-a", help="Take the ticket from the current git branch"),
    ] = False,
    interactive: Annotated[
        bool,
        typer.Option("--interactive", "-i", help="Choose the time interactively"),
    ] = False,
) -> None:
    """Log a finished block of time against a Jira ticket."""
    header("log time")

    # Parse before touching Clockify so bad input never causes a write
    if interactive or (not duration and not start and not end and prompt.is_interactive()):
        interval = __ask_interval()
    else:
        interval = interval_from_log_options(duration, start, end)

    client = clockify_client()
    catalog = CatalogRepository(client)
    jira = jira_client()

    ticket_id = detect_ticket(auto, ticket.upper() if ticket else None)
    if ticket_id is None:
        ticket_id = select_ticket(jira)
    if ticket_id is None:
        raise NotFound("No ticket given. Pass one with --task, e.g. --task CAM-451")

    ticket_info, clockify_project, task = resolve_work(
        catalog, jira, ticket_id, project, description
    )
    ticket_view(ticket_info)
    start_summary_view(clockify_project, task, ticket_info["description"])
    message.info(
        f"{datetime_to_display_time_str(interval['start'])} - "
        f"{datetime_to_display_time_str(interval['end'])} "
        f"({format_duration(interval_minutes(interval))})"
    )

    if not prompt.confirm("Create this time entry?", default=True):
        message.info("Time entry cancelled.")
        return

    new_entry: NewTimeEntry = {
        "start": interval["start"],
        "end": interval["end"],
        "project_id": clockify_project["id"],
        "task_id": task["id"],
        "description": ticket_info["description"],
    }
    entry = client.create_time_entry(new_entry)
    entry["project_name"] = clockify_project["name"]
    entry["task_name"] = task["name"]

    message.success("Time entry created")
    logged_entry_view(entry)
