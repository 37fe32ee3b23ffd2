# SPDX-License-Identifier: MIT

from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from clockwizard.model.issue import TicketInfo
from clockwizard.model.project import Project, Task

STATUS_STYLES = {"ACTIVE": "green", "DONE": "yellow"}


def __status_markup(status: str) -> str:
    style = STATUS_STYLES.get(status, "white")
    return f"[{style}]{status}[/{style}]"


def ticket_view(ticket: TicketInfo) -> None:
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("property", style="cyan")
    table.add_column("value")
    table.add_row("ticket", ticket["ticket_id"])

    issue = ticket["issue"]
    if issue is not None:
        table.add_row("summary", escape(issue["summary"]))
        table.add_row("status", escape(issue["status"] or "-"))
        table.add_row("assignee", escape(issue["assignee"] or "Unassigned"))
    else:
        table.add_row("summary", "[bright_black]not available[/bright_black]")

    Console().print(table)


def new_task_view(project: Project, task_name: str, status: str) -> None:
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("property", style="cyan")
    table.add_column("value")
    table.add_row("project", escape(project["name"]))
    table.add_row("task", escape(task_name))
    table.add_row("status", __status_markup(status))
    Console().print(table)


def task_view(task: Task, project: Project) -> None:
    table = Table(box=box.SIMPLE, show_header=False)
    table.add_column("property", style="cyan")
    table.add_column("value")
    table.add_row("project", escape(project["name"]))
    table.add_row("task", escape(task["name"]))
    table.add_row("status", __status_markup(task["status"]))
    table.add_row("task id", f"[bright_black]{task['id']}[/bright_black]")
    Console().print(table)


def tasks_view(tasks: list[Task], projects: dict[str, Project]) -> None:
    table = Table(box=box.SIMPLE)
    table.add_column("project")
    table.add_column("task")
    table.add_column("status")
    table.add_column("id", style="bright_black")

    for task in tasks:
        project = projects.get(task["project_id"])
        name = task["name"] if len(task["name"]) <= 50 else task["name"][:47] + "..."
        table.add_row(
            escape(project["name"] if project else task["project_id"]),
            escape(name),
            __status_markup(task["status"]),
            task["id"],
        )

    Console().print(table)


def tasks_summary_view(
    tasks: list[Task], project_count: int, search: Optional[str] = None
) -> None:
    console = Console()
    status_count: dict[str, int] = {}
    for task in tasks:
        status_count[task["status"]] = status_count.get(task["status"], 0) + 1

    console.print(f"projects: {project_count}")
    console.print(f"tasks: {len(tasks)}")
    for status, count in status_count.items():
        console.print(f"  {__status_markup(status)}: {count}")
    if search:
        console.print(f"[bright_black]matching '{escape(search)}'[/bright_black]")
    console.print()
