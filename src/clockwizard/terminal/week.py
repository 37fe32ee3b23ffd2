# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Annotated, Optional

import typer

from clockwizard.repository.catalog import CatalogRepository
from clockwizard.service.report import (
    aggregate,
    daily_breakdown,
    days_worked,
    sort_timeline,
    total_minutes,
    week_range,
    weekly_progress,
    working_days,
)
from clockwizard.terminal.common import clockify_client, user_id
from clockwizard.time import now_utc, to_local
from clockwizard.view import message
from clockwizard.view.export import entries_rows, write_csv
from clockwizard.view.header import header
from clockwizard.view.report import (
    breakdown_view,
    daily_breakdown_view,
    weekly_summary_view,
)

WEEK_LABELS = {0: "current week", -1: "last week", 1: "next week"}


def week(
    week_offset: Annotated[
        int,
        typer.Option(
            "--week-offset",
            "--week",
            "-w",
            help="Week offset: 0 is the current week, -1 last week, 1 next week",
        ),
    ] = 0,
    export: Annotated[
        Optional[Path],
        typer.Option("--export", help="Write the week's entries to a CSV file"),
    ] = None,
) -> None:
    """Show the week's progress against the 40 hour target."""
    now = now_utc()
    start, end = week_range(week_offset, now)
    local_start = to_local(start)
    week_number = local_start.week_of_year

    sub_header = (
        f"Week {week_number}, {local_start.year}: "
        f"{local_start.format('MMM D')} - {to_local(end).format('MMM D, YYYY')}"
    )
    if week_offset in WEEK_LABELS:
        sub_header += f" ({WEEK_LABELS[week_offset]})"
    header("weekly summary", sub_header)

    client = clockify_client()
    entries = CatalogRepository(client).hydrate(
        client.list_entries_in_range(user_id(), start, end)
    )

    if not entries:
        message.info("No time entries found for this week.")
        return

    total = total_minutes(entries, now)
    weekly_summary_view(
        weekly_progress(total), days_worked(entries), working_days(start, end)
    )
    daily_breakdown_view(daily_breakdown(entries, start, now))
    breakdown_view("By project", aggregate(entries, "project", now), total)

    if export is not None:
        write_csv(export, entries_rows(sort_timeline(entries), now, f"Week {week_number}"))
        message.success(f"Exported {len(entries)} entries to {export}")
