# SPDX-License-Identifier: MIT

import logging
from pathlib import Path
from typing import Optional

from clockwizard.client.clockify import ClockifyClient
from clockwizard.client.jira import JiraClient
from clockwizard.errors import ConfigurationMissing, RemoteUnavailable
from clockwizard.git import Git, branch_tickets, extract_ticket_id
from clockwizard.model.issue import TicketInfo
from clockwizard.model.project import Project, Task
from clockwizard.repository.catalog import CatalogRepository
from clockwizard.repository.configuration import CONFIGURATION_REPO
from clockwizard.service.resolve import describe_ticket, resolve_project, resolve_task
from clockwizard.service.timer import TimerService
from clockwizard.terminal import prompt
from clockwizard.view import message

logger = logging.getLogger(__name__)

RECENT_ISSUES = 10


def clockify_client() -> ClockifyClient:
    config = CONFIGURATION_REPO.require_clockify()
    return ClockifyClient(config["api_key"], config["workspace_id"])


def user_id() -> str:
    config = CONFIGURATION_REPO.require_clockify()
    if not config["user_id"]:
        raise ConfigurationMissing(
            "Clockify user id is missing. Run: clockwizard configure"
        )
    return config["user_id"]


def jira_client() -> Optional[JiraClient]:
    """The Jira client, or None when Jira has not been configured."""
    if not CONFIGURATION_REPO.has_jira_config():
        logger.debug("Jira is not configured, ticket details are unavailable")
        return None
    jira = CONFIGURATION_REPO.get_config()["jira"]
    return JiraClient(jira["url"], jira["email"], jira["token"])


def timer_service(
    client: ClockifyClient, catalog: Optional[CatalogRepository] = None
) -> TimerService:
    return TimerService(
        client,
        CONFIGURATION_REPO,
        user_id(),
        prompt.confirm,
        catalog if catalog is not None else CatalogRepository(client),
    )


def detect_ticket(auto: bool, ticket_id: Optional[str]) -> Optional[str]:
    """Fill in the ticket from the current git branch when none was given."""
    if ticket_id and not auto:
        return ticket_id
    if not auto and not CONFIGURATION_REPO.get_config()["timer"]["auto_detect_branch"]:
        return ticket_id

    folder = Path.cwd()
    git = Git()
    if not git.is_git_repo(folder):
        return ticket_id

    branch = git.current_branch(folder)
    detected = extract_ticket_id(branch)
    if detected is None:
        logger.debug("No ticket id in branch %s", branch)
        return ticket_id
    message.info(f"Auto-detected ticket {detected} from branch {branch}")
    return detected


def select_ticket(jira: Optional[JiraClient]) -> Optional[str]:
    """Pick a recently updated Jira issue or a ticket from a local branch, or type one."""
    candidates: list[tuple[str, str]] = []
    if jira is not None:
        try:
            issues = jira.search_recent_assigned_issues(RECENT_ISSUES)
        except RemoteUnavailable as e:
            message.warning(f"Could not fetch recent Jira issues: {e}")
        else:
            candidates += [
                (issue["key"], f"{issue['key']} - {issue['summary']}") for issue in issues
            ]

    known = {ticket_id for ticket_id, _ in candidates}
    local_tickets = [
        ticket_id
        for ticket_id in branch_tickets(Git().branches(Path.cwd()))
        if ticket_id not in known
    ]
    candidates += [
        (ticket_id, f"{ticket_id} (git branch)") for ticket_id in local_tickets[:RECENT_ISSUES]
    ]

    if candidates:
        options = ["Enter ticket manually"] + [label for _, label in candidates]
        index = prompt.choose("Select ticket", options)
        if index is None:
            return None
        if index > 0:
            return candidates[index - 1][0]

    ticket_id = prompt.ask("Ticket id (e.g. CAM-451)")
    return ticket_id.upper() if ticket_id else None


def resolve_work(
    catalog: CatalogRepository,
    jira: Optional[JiraClient],
    ticket_id: str,
    project_ref: Optional[str],
    description: Optional[str],
) -> tuple[TicketInfo, Project, Task]:
    ticket = describe_ticket(jira, ticket_id, description)
    if ticket["issue"] is not None:
        message.info(f"Found Jira issue {ticket_id}: {ticket['issue']['summary']}")

    project = resolve_project(
        catalog, CONFIGURATION_REPO, project_ref, ticket["project_key"], prompt.choose
    )
    task, created = resolve_task(catalog, project["id"], ticket_id, ticket["summary"])
    if created:
        message.info(f"Created task {task['name']}")
    else:
        message.info(f"Using existing task {task['name']}")
    return ticket, project, task
