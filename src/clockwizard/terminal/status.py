# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Annotated, Optional

import typer

from clockwizard.client.clockify import ClockifyClient
from clockwizard.client.jira import JiraClient
from clockwizard.errors import ClockWizardError
from clockwizard.git import Git
from clockwizard.model.time_entry import is_running
from clockwizard.repository.catalog import CatalogRepository
from clockwizard.repository.configuration import CONFIGURATION_REPO
from clockwizard.service.report import aggregate, period_range, total_minutes
from clockwizard.terminal.common import clockify_client, jira_client, timer_service, user_id
from clockwizard.time import datetime_to_display_datetime_str, now_utc, timezone_info
from clockwizard.view import message
from clockwizard.view.header import header
from clockwizard.view.report import breakdown_view, day_overview_view
from clockwizard.view.status import (
    ConnectionCheck,
    configuration_view,
    connections_view,
    git_view,
    mappings_view,
    timezone_view,
)
from clockwizard.view.timer import active_timer_view


def __show_timer(client: ClockifyClient) -> None:
    try:
        status = timer_service(client).query()
    except ClockWizardError as e:
        message.warning(f"Could not fetch timer status: {e}")
        return
    if status["warning"]:
        message.warning(status["warning"])
    active_timer_view(status)


def __show_git() -> None:
    info = Git().repository_info(Path.cwd())
    if info is not None:
        git_view(info)


def __show_today(client: ClockifyClient) -> None:
    now = now_utc()
    start, end = period_range("today", now=now)
    try:
        entries = CatalogRepository(client).hydrate(
            client.list_entries_in_range(user_id(), start, end)
        )
    except ClockWizardError as e:
        message.warning(f"Could not fetch today's entries: {e}")
        return
    if not entries:
        message.info("No time entries today.")
        return

    total = total_minutes(entries, now)
    running = next((entry for entry in entries if is_running(entry)), None)
    day_overview_view(total, len(entries), running, now)
    breakdown_view("By project", aggregate(entries, "project", now), total)


def __check(name: str, client: Optional[ClockifyClient | JiraClient]) -> ConnectionCheck:
    # Failure details are logged by test_connection
    if client is None:
        return {"name": name, "configured": False, "connected": False}
    return {"name": name, "configured": True, "connected": client.test_connection()}


def status(
    detailed: Annotated[
        bool,
        typer.Option("--detailed", "-d", help="Show ids, timer defaults and the config path"),
    ] = False,
    config_only: Annotated[
        bool,
        typer.Option("--config-only", help="Only show configuration"),
    ] = False,
    timer_only: Annotated[
        bool,
        typer.Option("--timer-only", help="Only show the timer"),
    ] = False,
    today: Annotated[
        bool,
        typer.Option("--today", help="Include a summary of today's entries"),
    ] = False,
    check_connections: Annotated[
        bool,
        typer.Option("--check-connections", "-c", help="Test the Clockify and Jira credentials"),
    ] = False,
) -> None:
    """Show configuration, the active timer and the detected git ticket."""
    header("status")

    if not timer_only:
        configuration_view(CONFIGURATION_REPO.get_config(), CONFIGURATION_REPO.path, detailed)
        mappings_view(CONFIGURATION_REPO.get_project_mappings())
        timezone_view(timezone_info(), datetime_to_display_datetime_str(now_utc()))

    if config_only:
        return

    client = clockify_client() if CONFIGURATION_REPO.is_configured() else None
    if client is None:
        message.warning("Clockify is not configured. Run: clockwizard configure")
    else:
        __show_timer(client)

    if not timer_only:
        __show_git()
        if today and client is not None:
            __show_today(client)

    if check_connections:
        checks = [__check("clockify", client), __check("jira", jira_client())]
        connections_view(checks)
        if not checks[0]["connected"]:
            message.info("Run 'clockwizard configure' to fix connection issues.")
