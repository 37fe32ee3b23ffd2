# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Annotated, Optional

import typer

from clockwizard.model.time_entry import is_running
from clockwizard.repository.catalog import CatalogRepository
from clockwizard.service.report import (
    aggregate,
    detect_gaps,
    period_range,
    sort_timeline,
    total_minutes,
)
from clockwizard.terminal.common import clockify_client, user_id
from clockwizard.time import datetime_to_display_date_str, now_utc
from clockwizard.view import message
from clockwizard.view.export import entries_rows, write_csv
from clockwizard.view.header import header
from clockwizard.view.report import breakdown_view, day_overview_view, timeline_view


def today(
    detailed: Annotated[
        bool,
        typer.Option("--detailed", "-d", help="Show project and task breakdown"),
    ] = False,
    export: Annotated[
        Optional[Path],
        typer.Option("--export", help="Write the day's entries to a CSV file"),
    ] = None,
) -> None:
    """Show today's time entries, totals and untracked gaps."""
    now = now_utc()
    header("today", datetime_to_display_date_str(now))

    client = clockify_client()
    start, end = period_range("today", now=now)
    entries = CatalogRepository(client).hydrate(
        client.list_entries_in_range(user_id(), start, end)
    )

    if not entries:
        message.info("No time entries found for today.")
        message.info("Use 'clockwizard start' or 'clockwizard log' to track time.")
        return

    total = total_minutes(entries, now)
    running = next((entry for entry in entries if is_running(entry)), None)
    day_overview_view(total, len(entries), running, now)

    if detailed:
        breakdown_view("By project", aggregate(entries, "project", now), total)
        breakdown_view("By task", aggregate(entries, "task", now), total)

    timeline = sort_timeline(entries)
    timeline_view(timeline, detect_gaps(timeline), now)

    if export is not None:
        write_csv(export, entries_rows(timeline, now))
        message.success(f"Exported {len(timeline)} entries to {export}")
