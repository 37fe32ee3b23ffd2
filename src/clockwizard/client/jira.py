# SPDX-License-Identifier: MIT

import logging
from typing import Any, Optional

import requests

from clockwizard.errors import RemoteUnavailable
from clockwizard.model.issue import Issue

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30
SEARCH_FIELDS = "summary,status,assignee,project,issuetype,priority"
RECENT_ISSUES_JQL = "assignee = currentUser() AND updated >= -7d ORDER BY updated DESC"


class JiraClient:
    def __init__(
        self,
        url: str,
        email: str,
        token: str,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = url.rstrip("/")
        self._session = session if session is not None else requests.Session()
        self._session.auth = (email, token)
        self._session.headers.update(
            {"Accept": "application/json", "Content-Type": "application/json"}
        )

    def __get(
        self, action: str, path: str, params: Optional[dict[str, Any]] = None
    ) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s params=%s", url, params)
        try:
            response = self._session.get(url, params=params, timeout=REQUEST_TIMEOUT)
        except requests.exceptions.RequestException as e:
            raise RemoteUnavailable(f"Failed to {action}: {e}")
        if not response.ok:
            raise RemoteUnavailable(
                f"Failed to {action}",
                status_code=response.status_code,
                body=response.text[:500] or None,
            )
        try:
            return response.json()
        except ValueError:
            raise RemoteUnavailable(
                f"Failed to {action}: invalid JSON response",
                status_code=response.status_code,
            )

    def get_current_user(self) -> dict[str, Any]:
        return self.__get("get current user", "/rest/api/3/myself")

    def get_issue(self, key: str) -> Issue:
        return convert_issue(self.__get(f"get issue {key}", f"/rest/api/3/issue/{key}"))

    def search_issues(self, jql: str, max_results: int = 50) -> list[Issue]:
        result = self.__get(
            "search issues",
            "/rest/api/3/search",
            params={"jql": jql, "maxResults": max_results, "fields": SEARCH_FIELDS},
        )
        return [convert_issue(raw) for raw in (result or {}).get("issues", [])]

    def search_recent_assigned_issues(self, max_results: int = 20) -> list[Issue]:
        return self.search_issues(RECENT_ISSUES_JQL, max_results)

    def test_connection(self) -> bool:
        try:
            self.get_current_user()
        except RemoteUnavailable as e:
            logger.warning("Jira connection test failed: %s", e)
            return False
        return True


def convert_issue(raw: dict[str, Any]) -> Issue:
    fields = raw.get("fields") or {}
    key = raw["key"]
    project = fields.get("project") or {}
    status = fields.get("status") or {}
    assignee = fields.get("assignee") or {}
    return {
        "key": key,
        "project_key": project.get("key") or key.split("-")[0],
        "summary": fields.get("summary") or "",
        "status": status.get("name"),
        "assignee": assignee.get("displayName"),
    }
