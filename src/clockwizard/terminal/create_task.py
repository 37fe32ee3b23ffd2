# SPDX-License-Identifier: MIT

from typing import Annotated, Optional, cast

import typer

from clockwizard.model.project import TaskStatus
from clockwizard.repository.catalog import CatalogRepository
from clockwizard.repository.configuration import CONFIGURATION_REPO
from clockwizard.service.resolve import describe_ticket, resolve_project, task_name_for
from clockwizard.terminal import prompt
from clockwizard.terminal.common import clockify_client, jira_client
from clockwizard.terminal.validate import validate_task_status
from clockwizard.view import message
from clockwizard.view.header import header
from clockwizard.view.task import new_task_view, task_view, ticket_view


def create_task(
    ticket: Annotated[str, typer.Argument(help="Jira ticket id, e.g. CAM-451")],
    project: Annotated[
        Optional[str],
        typer.Option("--project", "-p", help="Clockify project id or name"),
    ] = None,
    task_name: Annotated[
        Optional[str],
        typer.Option("--task-name", "-t", help="Custom task name"),
    ] = None,
    status: Annotated[
        str,
        typer.Option("--status", "-s", callback=validate_task_status, help="ACTIVE or DONE"),
    ] = "ACTIVE",
) -> None:
    """Create a Clockify task named after a Jira ticket."""
    header("create task")

    ticket_id = ticket.upper()
    client = clockify_client()
    catalog = CatalogRepository(client)
    jira = jira_client()
    if jira is None:
        message.warning("Jira not configured. Creating task with ticket id only.")

    ticket_info = describe_ticket(jira, ticket_id)
    ticket_view(ticket_info)

    name = task_name or task_name_for(ticket_id, ticket_info["summary"])
    clockify_project = resolve_project(
        catalog, CONFIGURATION_REPO, project, ticket_info["project_key"], prompt.choose
    )

    existing = catalog.find_task_by_name(clockify_project["id"], name)
    if existing is not None:
        message.warning(f"Task already exists: {name}")
        task_view(existing, clockify_project)
        return

    new_task_view(clockify_project, name, status)
    if not prompt.confirm("Create this task?", default=True):
        message.info("Task creation cancelled.")
        return

    task = catalog.create_task(clockify_project["id"], name, cast(TaskStatus, status))
    message.success("Task created")
    task_view(task, clockify_project)
