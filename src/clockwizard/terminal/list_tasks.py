# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Annotated, Optional

import typer

from clockwizard.errors import RemoteUnavailable
from clockwizard.model.project import Task
from clockwizard.repository.catalog import CatalogRepository
from clockwizard.service.task import filter_tasks, search_projects, sort_tasks
from clockwizard.terminal.common import clockify_client
from clockwizard.terminal.validate import validate_task_output, validate_task_status
from clockwizard.view import message
from clockwizard.view.export import task_rows, tasks_to_json, write_csv
from clockwizard.view.header import header
from clockwizard.view.task import tasks_summary_view, tasks_view


def list_tasks(
    project: Annotated[
        Optional[str],
        typer.Option("--project", "-p", help="Filter by project id or name"),
    ] = None,
    status: Annotated[
        Optional[str],
        typer.Option("--status", "-s", callback=validate_task_status, help="ACTIVE or DONE"),
    ] = None,
    search: Annotated[
        Optional[str],
        typer.Option("--search", help="Only tasks whose name contains this text"),
    ] = None,
    output: Annotated[
        str,
        typer.Option(
            "--output",
            "--format",
            "-f",
            callback=validate_task_output,
            help="table or json",
        ),
    ] = "table",
    export: Annotated[
        Optional[Path],
        typer.Option("--export", help="Write the tasks to a CSV file"),
    ] = None,
) -> None:
    """List Clockify tasks across projects."""
    # json goes to stdout bare so it can be piped
    decorated = output == "table"
    if decorated:
        header("tasks")

    catalog = CatalogRepository(clockify_client())
    projects = search_projects(catalog.get_all_projects(), project)

    tasks: list[Task] = []
    for clockify_project in projects:
        try:
            tasks += filter_tasks(catalog.get_all_tasks(clockify_project["id"]), status, search)
        except RemoteUnavailable as e:
            message.warning(f"Could not fetch tasks from {clockify_project['name']}: {e}")

    if not tasks and decorated:
        message.info("No tasks found matching the criteria.")
        return

    projects_by_id = {p["id"]: p for p in projects}
    tasks = sort_tasks(tasks, projects_by_id)

    if decorated:
        tasks_summary_view(tasks, len(projects), search)
        tasks_view(tasks, projects_by_id)
    else:
        typer.echo(tasks_to_json(tasks, projects_by_id))

    if export is not None:
        write_csv(export, task_rows(tasks, projects_by_id))
        message.success(f"Exported {len(tasks)} tasks to {export}")
