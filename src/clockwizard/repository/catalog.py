# SPDX-License-Identifier: MIT

import logging
from typing import TYPE_CHECKING, Optional

from clockwizard.model.project import Project, Task, TaskStatus
from clockwizard.model.time_entry import TimeEntry

if TYPE_CHECKING:
    from clockwizard.client.clockify import ClockifyClient

logger = logging.getLogger(__name__)

UNKNOWN_PROJECT = "Unknown Project"
UNKNOWN_TASK = "Unknown Task"


class CatalogRepository:
    """
    Per-invocation cache of the workspace's projects and tasks.

    Projects are fetched once on first use; tasks are fetched once per project.
    Nothing is written back, the cache lives as long as the command.
    """

    def __init__(self, client: "ClockifyClient") -> None:
        self._client = client
        self._projects: Optional[dict[str, Project]] = None
        self._tasks: dict[str, dict[str, Task]] = {}

    @property
    def projects(self) -> dict[str, Project]:
        if self._projects is None:
            self.__load_projects()
        if self._projects is None:
            raise ValueError()
        return self._projects

    def __load_projects(self) -> None:
        projects = self._client.get_all_projects()
        logger.debug("Loaded %d projects", len(projects))
        self._projects = {project["id"]: project for project in projects}

    def __tasks_for(self, project_id: str) -> dict[str, Task]:
        if project_id not in self._tasks:
            tasks = self._client.get_all_tasks(project_id)
            logger.debug("Loaded %d tasks for project %s", len(tasks), project_id)
            self._tasks[project_id] = {task["id"]: task for task in tasks}
        return self._tasks[project_id]

    def get_all_projects(self) -> list[Project]:
        return sorted(self.projects.values(), key=lambda p: p["name"].lower())

    def get_project(self, project_id: str) -> Optional[Project]:
        return self.projects.get(project_id)

    def get_all_tasks(self, project_id: str) -> list[Task]:
        return list(self.__tasks_for(project_id).values())

    def get_task(self, project_id: str, task_id: str) -> Optional[Task]:
        return self.__tasks_for(project_id).get(task_id)

    def find_task_by_name(self, project_id: str, name: str) -> Optional[Task]:
        for task in self.__tasks_for(project_id).values():
            if task["name"] == name:
                return task
        return None

    def create_task(
        self, project_id: str, name: str, status: TaskStatus = "ACTIVE"
    ) -> Task:
        task = self._client.create_task(project_id, name, status)
        self.__tasks_for(project_id)[task["id"]] = task
        logger.info("Created task '%s' in project %s", name, project_id)
        return task

    def hydrate(self, entries: list[TimeEntry]) -> list[TimeEntry]:
        """Fill in project and task names for entries that only carry ids."""
        hydrated = []
        for entry in entries:
            entry = entry.copy()
            project_id = entry["project_id"]
            if not entry["project_name"]:
                project = self.get_project(project_id) if project_id else None
                entry["project_name"] = project["name"] if project else UNKNOWN_PROJECT
            if entry["task_id"] and not entry["task_name"]:
                task = self.get_task(project_id, entry["task_id"]) if project_id else None
                entry["task_name"] = task["name"] if task else UNKNOWN_TASK
            hydrated.append(entry)
        return hydrated
