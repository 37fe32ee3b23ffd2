# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Annotated, Optional, cast

import typer

from clockwizard.model.report import GroupBy
from clockwizard.repository.catalog import CatalogRepository
from clockwizard.service.report import (
    aggregate,
    filter_by_project,
    period_range,
    summarize_period,
    total_minutes,
)
from clockwizard.terminal.common import clockify_client, user_id
from clockwizard.terminal.validate import (
    validate_group_by,
    validate_period,
    validate_report_output,
)
from clockwizard.time import now_utc
from clockwizard.view import message
from clockwizard.view.export import (
    groups_to_json,
    report_rows,
    rows_to_csv,
    write_csv,
    write_text,
)
from clockwizard.view.header import header
from clockwizard.view.report import (
    period_summary_view,
    report_info_view,
    report_table_view,
)


def reports(
    period: Annotated[
        str,
        typer.Option(
            "--period",
            "-p",
            callback=validate_period,
            help="today, week, month or custom",
        ),
    ] = "week",
    start_date: Annotated[
        Optional[str],
        typer.Option("--start", "-s", help="Start date for custom periods (YYYY-MM-DD)"),
    ] = None,
    end_date: Annotated[
        Optional[str],
        typer.Option("--end", "-e", help="End date for custom periods (YYYY-MM-DD)"),
    ] = None,
    project: Annotated[
        Optional[str],
        typer.Option("--project", help="Only entries of this project (id or name)"),
    ] = None,
    group_by: Annotated[
        str,
        typer.Option(
            "--group-by",
            "-g",
            callback=validate_group_by,
            help="project, task or date",
        ),
    ] = "project",
    output: Annotated[
        str,
        typer.Option(
            "--output",
            "--format",
            "-f",
            callback=validate_report_output,
            help="table, csv or json",
        ),
    ] = "table",
    export: Annotated[
        Optional[Path],
        typer.Option("--export", help="Write the report to a file"),
    ] = None,
) -> None:
    """Summarize time over a period, grouped by project, task or date."""
    now = now_utc()
    start, end = period_range(period, start_date, end_date, now)
    grouping = cast(GroupBy, group_by)
    # Piped csv/json output carries only the data
    decorated = output == "table" or export is not None

    if decorated:
        header("reports")
        report_info_view(start, end, grouping, project)

    client = clockify_client()
    entries = CatalogRepository(client).hydrate(
        client.list_entries_in_range(user_id(), start, end)
    )
    entries = filter_by_project(entries, project)

    if not entries and decorated:
        message.info("No time entries found for the specified criteria.")
        return

    groups = aggregate(entries, grouping, now)
    if decorated:
        period_summary_view(summarize_period(entries, start, end, now))

    match output:
        case "csv":
            rows = report_rows(groups, grouping)
            if export is not None:
                write_csv(export, rows)
                message.success(f"Report exported to {export}")
            else:
                typer.echo(rows_to_csv(rows), nl=False)
        case "json":
            content = groups_to_json(groups)
            if export is not None:
                write_text(export, content)
                message.success(f"Report exported to {export}")
            else:
                typer.echo(content)
        case _:
            report_table_view(groups, grouping, total_minutes(entries, now))
            if export is not None:
                write_csv(export, report_rows(groups, grouping))
                message.success(f"Report exported to {export}")
