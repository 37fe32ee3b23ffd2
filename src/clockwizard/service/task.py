# SPDX-License-Identifier: MIT

from typing import Optional

from clockwizard.errors import NotFound
from clockwizard.model.project import Project, Task


def search_projects(projects: list[Project], ref: Optional[str]) -> list[Project]:
    """
    Projects matching ref by id, exact name or case-insensitive substring.

    Raises:
        NotFound: If ref is given and nothing matches
    """
    if not ref:
        return list(projects)
    lowered = ref.lower()
    matches = [
        project
        for project in projects
        if project["id"] == ref or project["name"] == ref or lowered in project["name"].lower()
    ]
    if not matches:
        raise NotFound(f"No projects found matching: {ref}")
    return matches


def filter_tasks(
    tasks: list[Task], status: Optional[str] = None, search: Optional[str] = None
) -> list[Task]:
    filtered = tasks
    if status:
        filtered = [task for task in filtered if task["status"] == status.upper()]
    if search:
        lowered = search.lower()
        filtered = [task for task in filtered if lowered in task["name"].lower()]
    return filtered


def sort_tasks(tasks: list[Task], projects: dict[str, Project]) -> list[Task]:
    """Order by project name, then task name."""

    def key(task: Task) -> tuple[str, str]:
        project = projects.get(task["project_id"])
        return (project["name"] if project else "", task["name"])

    return sorted(tasks, key=key)
