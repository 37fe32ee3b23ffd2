# SPDX-License-Identifier: MIT

import logging
import re
from typing import Any, Callable, Optional, TypeVar, cast

import pendulum
import requests

from clockwizard import time
from clockwizard.errors import RemoteUnavailable
from clockwizard.model.project import Project, Task, TaskStatus
from clockwizard.model.time_entry import NewTimeEntry, TimeEntry

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.clockify.me/api/v1"
REQUEST_TIMEOUT = 30
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200
RECENT_ENTRIES_PAGE_SIZE = 20

T = TypeVar("T")


class ClockifyClient:
    """
    Blocking Clockify REST client.

    Every method returns canonical model dicts; wire variants (flat
    projectId vs nested project.id, hydrated entries) never leave this module.
    """

    def __init__(
        self,
        api_key: str,
        workspace_id: str,
        base_url: str = API_BASE_URL,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.workspace_id = workspace_id
        self.base_url = base_url.rstrip("/")
        self._session = session if session is not None else requests.Session()
        # Keys pasted from the web UI sometimes carry invisible characters
        clean_api_key = re.sub(r"[^\x20-\x7E]", "", api_key.strip())
        self._session.headers.update(
            {
                "X-Api-Key": clean_api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": "clockwizard/0.1",
            }
        )

    # ─────────────────────────────────────────────────────────────
    # Transport
    # ─────────────────────────────────────────────────────────────

    def __request(
        self,
        action: str,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        not_found_is_empty: bool = False,
    ) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self._session.request(
                method, url, params=params, json=json, timeout=REQUEST_TIMEOUT
            )
        except requests.exceptions.Timeout as e:
            raise RemoteUnavailable(f"Failed to {action}: request timed out ({e})")
        except requests.exceptions.RequestException as e:
            raise RemoteUnavailable(f"Failed to {action}: {e}")

        if not_found_is_empty and response.status_code == 404:
            return None
        if not response.ok:
            raise RemoteUnavailable(
                f"Failed to {action}",
                status_code=response.status_code,
                body=response.text[:500] or None,
            )
        if not response.content or not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError:
            raise RemoteUnavailable(
                f"Failed to {action}: invalid JSON response",
                status_code=response.status_code,
                body=response.text[:500],
            )

    def __fetch_all(self, fetch_page: Callable[[int, int], list[T]]) -> list[T]:
        items: list[T] = []
        page = 1
        while True:
            batch = fetch_page(page, MAX_PAGE_SIZE)
            items.extend(batch)
            if len(batch) < MAX_PAGE_SIZE:
                return items
            page += 1

    def __workspace_path(self, suffix: str) -> str:
        return f"/workspaces/{self.workspace_id}{suffix}"

    # ─────────────────────────────────────────────────────────────
    # Account
    # ─────────────────────────────────────────────────────────────

    def get_current_user(self) -> dict[str, Any]:
        user = self.__request("get current user", "GET", "/user") or {}
        return {
            "id": user.get("id", ""),
            "name": user.get("name", ""),
            "email": user.get("email", ""),
            "default_workspace": user.get("defaultWorkspace"),
        }

    def get_workspaces(self) -> list[dict[str, str]]:
        workspaces = self.__request("get workspaces", "GET", "/workspaces") or []
        return [{"id": w["id"], "name": w.get("name", w["id"])} for w in workspaces]

    def test_connection(self) -> bool:
        try:
            self.get_current_user()
        except RemoteUnavailable as e:
            logger.warning("Clockify connection test failed: %s", e)
            return False
        return True

    # ─────────────────────────────────────────────────────────────
    # Projects and tasks
    # ─────────────────────────────────────────────────────────────

    def list_projects(
        self,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        include_archived: bool = False,
    ) -> list[Project]:
        params: dict[str, Any] = {"page": page, "page-size": min(page_size, MAX_PAGE_SIZE)}
        if include_archived:
            params["archived"] = "true"
        raw_projects = self.__request(
            "get projects", "GET", self.__workspace_path("/projects"), params=params
        )
        return [convert_project(raw) for raw in raw_projects or []]

    def get_all_projects(self, include_archived: bool = False) -> list[Project]:
        return self.__fetch_all(
            lambda page, size: self.list_projects(page, size, include_archived)
        )

    def list_tasks(
        self, project_id: str, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> list[Task]:
        params = {"page": page, "page-size": min(page_size, MAX_PAGE_SIZE)}
        raw_tasks = self.__request(
            "get tasks",
            "GET",
            self.__workspace_path(f"/projects/{project_id}/tasks"),
            params=params,
        )
        return [convert_task(raw, project_id) for raw in raw_tasks or []]

    def get_all_tasks(self, project_id: str) -> list[Task]:
        return self.__fetch_all(
            lambda page, size: self.list_tasks(project_id, page, size)
        )

    def create_task(
        self, project_id: str, name: str, status: TaskStatus = "ACTIVE"
    ) -> Task:
        raw_task = self.__request(
            "create task",
            "POST",
            self.__workspace_path(f"/projects/{project_id}/tasks"),
            json={"name": name, "status": status},
        )
        return convert_task(raw_task, project_id)

    # ─────────────────────────────────────────────────────────────
    # Time entries
    # ─────────────────────────────────────────────────────────────

    def create_time_entry(self, new_entry: NewTimeEntry) -> TimeEntry:
        data: dict[str, Any] = {
            "start": time.datetime_to_iso_str(new_entry["start"]),
            "projectId": new_entry["project_id"],
        }
        if new_entry["end"] is not None:
            data["end"] = time.datetime_to_iso_str(new_entry["end"])
        if new_entry["task_id"]:
            data["taskId"] = new_entry["task_id"]
        if new_entry["description"]:
            data["description"] = new_entry["description"]

        raw_entry = self.__request(
            "create time entry", "POST", self.__workspace_path("/time-entries"), json=data
        )
        if not raw_entry or "id" not in raw_entry:
            raise RemoteUnavailable(
                "Failed to create time entry: response is missing the entry id",
                body=str(raw_entry),
            )
        return convert_time_entry(raw_entry)

    def get_current_open_entry(self, user_id: str) -> Optional[TimeEntry]:
        raw = self.__request(
            "get current time entry",
            "GET",
            self.__workspace_path(f"/user/{user_id}/time-entries"),
            params={"in-progress": "true"},
            not_found_is_empty=True,
        )
        if isinstance(raw, list):
            raw = raw[0] if raw else None
        # Some deployments answer {} instead of an empty body
        if not raw or "id" not in raw:
            return None
        return convert_time_entry(raw)

    def list_recent_entries(
        self,
        user_id: str,
        page: int = 1,
        page_size: int = RECENT_ENTRIES_PAGE_SIZE,
    ) -> list[TimeEntry]:
        return self.__list_entries_page(user_id, page, page_size)

    def list_entries_in_range(
        self, user_id: str, start: pendulum.DateTime, end: pendulum.DateTime
    ) -> list[TimeEntry]:
        return self.__fetch_all(
            lambda page, size: self.__list_entries_page(user_id, page, size, start, end)
        )

    def __list_entries_page(
        self,
        user_id: str,
        page: int,
        page_size: int,
        start: Optional[pendulum.DateTime] = None,
        end: Optional[pendulum.DateTime] = None,
    ) -> list[TimeEntry]:
        params: dict[str, Any] = {"page": page, "page-size": min(page_size, MAX_PAGE_SIZE)}
        if start is not None:
            params["start"] = time.datetime_to_iso_str(start)
        if end is not None:
            params["end"] = time.datetime_to_iso_str(end)
        raw_entries = self.__request(
            "get time entries",
            "GET",
            self.__workspace_path(f"/user/{user_id}/time-entries"),
            params=params,
        )
        return [convert_time_entry(raw) for raw in raw_entries or []]

    def patch_stop_open_entry(self, user_id: str, end: pendulum.DateTime) -> TimeEntry:
        raw_entry = self.__request(
            "stop timer",
            "PATCH",
            self.__workspace_path(f"/user/{user_id}/time-entries"),
            json={"end": time.datetime_to_iso_str(end)},
        )
        if not raw_entry or "id" not in raw_entry:
            raise RemoteUnavailable(
                "Failed to stop timer: response is missing the entry id",
                body=str(raw_entry),
            )
        return convert_time_entry(raw_entry)


def convert_project(raw: dict[str, Any]) -> Project:
    return {
        "id": raw["id"],
        "name": raw.get("name") or raw["id"],
        "color": raw.get("color"),
        "archived": bool(raw.get("archived", False)),
    }


def convert_task(raw: dict[str, Any], project_id: Optional[str] = None) -> Task:
    status = str(raw.get("status") or "ACTIVE").upper()
    return {
        "id": raw["id"],
        "name": raw.get("name", ""),
        "status": cast(TaskStatus, "DONE" if status == "DONE" else "ACTIVE"),
        "project_id": raw.get("projectId") or project_id or "",
    }


def _nested(raw: dict[str, Any], key: str, field: str) -> Optional[Any]:
    nested = raw.get(key)
    if isinstance(nested, dict):
        return nested.get(field)
    return None


def convert_time_entry(raw: dict[str, Any]) -> TimeEntry:
    """Normalise every Clockify time entry shape into a TimeEntry."""
    interval = raw.get("timeInterval") or {}
    start = interval.get("start") or raw.get("start")
    end = interval.get("end") if "timeInterval" in raw else raw.get("end")

    tags: list[str] = []
    for tag in raw.get("tags") or []:
        if isinstance(tag, dict):
            tags.append(tag.get("name") or tag.get("id", ""))
        else:
            tags.append(str(tag))
    if not tags:
        tags = [str(tag_id) for tag_id in raw.get("tagIds") or []]

    return {
        "id": raw.get("id") or raw.get("_id") or "",
        "start": time.datetime_from_str(start),
        "end": time.datetime_from_str_optional(end),
        "project_id": raw.get("projectId") or _nested(raw, "project", "id"),
        "project_name": raw.get("projectName") or _nested(raw, "project", "name"),
        "task_id": raw.get("taskId") or _nested(raw, "task", "id"),
        "task_name": raw.get("taskName") or _nested(raw, "task", "name"),
        "description": raw.get("description") or "",
        "tags": tags,
        "billable": bool(raw.get("billable", False)),
    }
