# SPDX-License-Identifier: MIT

import unittest
from typing import Optional
from unittest import mock

from fakes import FakeClockifyClient, MemoryTimerStore, make_project

from clockwizard.errors import NotFound, RemoteUnavailable
from clockwizard.repository.catalog import CatalogRepository
from clockwizard.service.resolve import (
    describe_ticket,
    project_key_from_ticket,
    resolve_project,
    resolve_task,
    task_name_for,
)
from clockwizard.service.task import filter_tasks, search_projects


def never_choose(message: str, options: list[str]) -> Optional[int]:
    raise AssertionError("no prompt expected")


class TestResolveProject(unittest.TestCase):
    def setUp(self) -> None:
        self.client = FakeClockifyClient(
            [make_project("p1", "Website"), make_project("p2", "Mobile App")]
        )
        self.catalog = CatalogRepository(self.client)  # type: ignore[arg-type]
        self.store = MemoryTimerStore()

    def test_explicit_name_does_not_touch_mappings(self) -> None:
        project = resolve_project(self.catalog, self.store, "Mobile App", "CAM", never_choose)
        self.assertEqual(project["id"], "p2")
        self.assertEqual(self.store.mappings, {})

    def test_explicit_id(self) -> None:
        project = resolve_project(self.catalog, self.store, "p1", None, never_choose)
        self.assertEqual(project["name"], "Website")

    def test_explicit_miss_raises(self) -> None:
        with self.assertRaises(NotFound):
            resolve_project(self.catalog, self.store, "Nope", "CAM", never_choose)

    def test_mapping_is_used(self) -> None:
        self.store.mappings["CAM"] = "p2"
        project = resolve_project(self.catalog, self.store, None, "CAM", never_choose)
        self.assertEqual(project["id"], "p2")

    def test_choice_is_saved_as_mapping(self) -> None:
        # Projects are offered sorted by name
        choose = mock.Mock(return_value=0)
        project = resolve_project(self.catalog, self.store, None, "CAM", choose)
        self.assertEqual(project["name"], "Mobile App")
        self.assertEqual(self.store.mappings, {"CAM": "p2"})
        choose.assert_called_once_with("Select Clockify project", ["Mobile App", "Website"])

    def test_stale_mapping_falls_back_to_choice(self) -> None:
        self.store.mappings["CAM"] = "gone"
        project = resolve_project(self.catalog, self.store, None, "CAM", lambda m, o: 1)
        self.assertEqual(project["id"], "p1")
        self.assertEqual(self.store.mappings["CAM"], "p1")

    def test_no_choice_raises(self) -> None:
        with self.assertRaises(NotFound):
            resolve_project(self.catalog, self.store, None, "CAM", lambda m, o: None)

    def test_projects_are_fetched_once(self) -> None:
        resolve_project(self.catalog, self.store, "p1", None, never_choose)
        resolve_project(self.catalog, self.store, "Website", None, never_choose)
        self.assertEqual(self.client.project_fetches, 1)


class TestResolveTask(unittest.TestCase):
    def setUp(self) -> None:
        self.client = FakeClockifyClient([make_project("p1", "Website")])
        self.catalog = CatalogRepository(self.client)  # type: ignore[arg-type]

    def test_task_name(self) -> None:
        self.assertEqual(task_name_for("CAM-451", "Fix login"), "CAM-451 Fix login")
        self.assertEqual(task_name_for("CAM-451"), "CAM-451")

    def test_resolve_task_is_idempotent(self) -> None:
        first, created = resolve_task(self.catalog, "p1", "CAM-451", "Fix login")
        self.assertTrue(created)
        second, created_again = resolve_task(self.catalog, "p1", "CAM-451", "Fix login")
        self.assertFalse(created_again)
        self.assertEqual(first["id"], second["id"])
        self.assertEqual(len(self.client.tasks["p1"]), 1)

    def test_existing_task_is_reused(self) -> None:
        self.client.create_task("p1", "CAM-7")
        task, created = resolve_task(CatalogRepository(self.client), "p1", "CAM-7")  # type: ignore[arg-type]
        self.assertFalse(created)
        self.assertEqual(task["name"], "CAM-7")


class TestDescribeTicket(unittest.TestCase):
    def test_without_jira(self) -> None:
        info = describe_ticket(None, "CAM-451")
        self.assertEqual(info["project_key"], "CAM")
        self.assertEqual(info["description"], "Work on CAM-451")
        self.assertIsNone(info["summary"])

    def test_with_jira_issue(self) -> None:
        jira = mock.Mock()
        jira.get_issue.return_value = {
            "key": "CAM-451",
            "project_key": "CAMP",
            "summary": "Fix login",
            "status": "In Progress",
            "assignee": "Ana",
        }
        info = describe_ticket(jira, "CAM-451")
        self.assertEqual(info["project_key"], "CAMP")
        self.assertEqual(info["description"], "Work on CAM-451: Fix login")
        self.assertEqual(info["summary"], "Fix login")

    def test_explicit_description_wins(self) -> None:
        jira = mock.Mock()
        jira.get_issue.side_effect = RemoteUnavailable("Failed to get issue", status_code=404)
        info = describe_ticket(jira, "CAM-451", "Pairing")
        self.assertEqual(info["description"], "Pairing")
        self.assertIsNone(info["issue"])

    def test_project_key_from_ticket(self) -> None:
        self.assertEqual(project_key_from_ticket("cam_12"), "CAM")


class TestTaskFilters(unittest.TestCase):
    def test_search_projects(self) -> None:
        projects = [make_project("p1", "Website"), make_project("p2", "Mobile App")]
        self.assertEqual([p["id"] for p in search_projects(projects, "app")], ["p2"])
        with self.assertRaises(NotFound):
            search_projects(projects, "desktop")

    def test_filter_tasks(self) -> None:
        tasks = [
            {"id": "t1", "name": "CAM-1 Login", "status": "ACTIVE", "project_id": "p1"},
            {"id": "t2", "name": "CAM-2 Logout", "status": "DONE", "project_id": "p1"},
        ]
        self.assertEqual([t["id"] for t in filter_tasks(tasks, "done")], ["t2"])  # type: ignore[arg-type]
        self.assertEqual([t["id"] for t in filter_tasks(tasks, None, "login")], ["t1"])  # type: ignore[arg-type]
