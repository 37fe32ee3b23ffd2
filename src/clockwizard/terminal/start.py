# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer

from clockwizard.errors import ConflictError, NotFound
from clockwizard.model.timer import TimerState
from clockwizard.repository.catalog import CatalogRepository
from clockwizard.terminal import prompt
from clockwizard.terminal.common import (
    clockify_client,
    detect_ticket,
    jira_client,
    resolve_work,
    select_ticket,
    timer_service,
)
from clockwizard.view import message
from clockwizard.view.header import header
from clockwizard.view.task import ticket_view
from clockwizard.view.timer import active_timer_view, start_summary_view, started_view


def start(
    ticket: Annotated[
        Optional[str],
        typer.Argument(help="Jira ticket id, e.g. CAM-451"),
    ] = None,
    project: Annotated[
        Optional[str],
        typer.Option("--project", "-p", help="Clockify project id or name"),
    ] = None,
    description: Annotated[
        Optional[str],
        typer.Option("--description", "-d", help="Time entry description"),
    ] = None,
    auto: Annotated[
        bool,
        typer.Option("--auto", "-a", help="Take the ticket from the current git branch"),
    ] = False,
) -> None:
    """Start a timer on a Jira ticket."""
    header("start timer")

    client = clockify_client()
    catalog = CatalogRepository(client)
    timers = timer_service(client, catalog)
    jira = jira_client()

    ticket_id = detect_ticket(auto, ticket.upper() if ticket else None)
    if ticket_id is None:
        ticket_id = select_ticket(jira)
    if ticket_id is None:
        raise NotFound("No ticket given. Pass one, e.g. clockwizard start CAM-451")

    ticket_info, clockify_project, task = resolve_work(
        catalog, jira, ticket_id, project, description
    )
    ticket_view(ticket_info)
    start_summary_view(clockify_project, task, ticket_info["description"])

    if not prompt.confirm("Start this timer?", default=True):
        message.info("Timer start cancelled.")
        return

    try:
        entry = timers.start(clockify_project, task, ticket_info["description"])
    except ConflictError as e:
        message.warning("A timer is already running")
        active_timer_view(
            {
                "state": TimerState.RUNNING_REMOTE,
                "entry": e.entry,
                "remote_ok": True,
                "warning": None,
            }
        )
        if not prompt.confirm("Stop current timer and start new one?", default=False):
            message.info("Timer start cancelled.")
            return
        timers.stop()
        entry = timers.start(clockify_project, task, ticket_info["description"])

    message.success("Timer started")
    started_view(entry)
    message.info("Use 'clockwizard stop' to stop the timer")
