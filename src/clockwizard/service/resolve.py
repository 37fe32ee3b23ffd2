# SPDX-License-Identifier: MIT

import logging
from typing import TYPE_CHECKING, Callable, Optional

from clockwizard.errors import NotFound, RemoteUnavailable
from clockwizard.model.active_timer import ProjectMappingStore
from clockwizard.model.issue import TicketInfo
from clockwizard.model.project import Project, Task, TaskStatus
from clockwizard.repository.catalog import CatalogRepository

if TYPE_CHECKING:
    from clockwizard.client.jira import JiraClient

logger = logging.getLogger(__name__)

# Receives a prompt and the option labels, returns the chosen index
Choose = Callable[[str, list[str]], Optional[int]]


def _match_exact(catalog: CatalogRepository, ref: str) -> Optional[Project]:
    project = catalog.get_project(ref)
    if project is not None:
        return project
    for project in catalog.get_all_projects():
        if project["name"] == ref:
            return project
    return None


def resolve_project(
    catalog: CatalogRepository,
    mappings: ProjectMappingStore,
    explicit_ref: Optional[str],
    project_key: Optional[str],
    choose: Choose,
) -> Project:
    """
    Pick the Clockify project for a piece of work.

    An explicit id or name wins, then the saved mapping for the ticket's
    project key, then an interactive choice. Only the interactive choice
    records a new mapping.

    Raises:
        NotFound: If the explicit reference matches nothing or no project is chosen
    """
    if explicit_ref:
        project = _match_exact(catalog, explicit_ref)
        if project is None:
            raise NotFound(f"Clockify project '{explicit_ref}' not found")
        return project

    if project_key:
        mapped_ref = mappings.get_project_mapping(project_key)
        if mapped_ref:
            project = _match_exact(catalog, mapped_ref)
            if project is not None:
                logger.info("Using mapped project %s for %s", project["name"], project_key)
                return project
            logger.warning(
                "Project mapping %s -> %s no longer matches a project", project_key, mapped_ref
            )

    projects = catalog.get_all_projects()
    if not projects:
        raise NotFound("No Clockify projects available in this workspace")

    index = choose("Select Clockify project", [p["name"] for p in projects])
    if index is None:
        raise NotFound("No Clockify project selected")
    project = projects[index]

    if project_key:
        mappings.add_project_mapping(project_key, project["id"])
        logger.info("Saved project mapping %s -> %s", project_key, project["name"])
    return project


def task_name_for(ticket_id: str, summary: Optional[str] = None) -> str:
    if summary:
        return f"{ticket_id} {summary}"
    return ticket_id


def resolve_task(
    catalog: CatalogRepository,
    project_id: str,
    ticket_id: str,
    summary: Optional[str] = None,
    status: TaskStatus = "ACTIVE",
) -> tuple[Task, bool]:
    """Find the ticket's task by exact name or create it. Returns (task, created)."""
    name = task_name_for(ticket_id, summary)
    task = catalog.find_task_by_name(project_id, name)
    if task is not None:
        return task, False
    return catalog.create_task(project_id, name, status), True


def project_key_from_ticket(ticket_id: str) -> Optional[str]:
    prefix = ticket_id.replace("_", "-").split("-")[0]
    return prefix.upper() if prefix else None


def describe_ticket(
    jira: Optional["JiraClient"],
    ticket_id: str,
    description: Optional[str] = None,
) -> TicketInfo:
    """Collect what is known about a ticket; Jira is optional and may be down."""
    info: TicketInfo = {
        "ticket_id": ticket_id,
        "project_key": project_key_from_ticket(ticket_id),
        "summary": None,
        "description": description or f"Work on {ticket_id}",
        "issue": None,
    }
    if jira is None:
        return info

    try:
        issue = jira.get_issue(ticket_id)
    except RemoteUnavailable as e:
        logger.warning("Could not fetch Jira issue %s: %s", ticket_id, e)
        return info

    info["issue"] = issue
    info["project_key"] = issue["project_key"]
    info["summary"] = issue["summary"] or None
    if not description and issue["summary"]:
        info["description"] = f"Work on {ticket_id}: {issue['summary']}"
    return info
