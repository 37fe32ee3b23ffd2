# SPDX-License-Identifier: MIT

import json
import unittest
from typing import Any
from unittest import mock

import pendulum
import requests

from clockwizard.client.clockify import (
    MAX_PAGE_SIZE,
    ClockifyClient,
    convert_task,
    convert_time_entry,
)
from clockwizard.errors import RemoteUnavailable


def make_response(status_code: int, body: Any = None) -> mock.Mock:
    text = "" if body is None else json.dumps(body)
    response = mock.Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    response.content = text.encode()
    response.json.side_effect = lambda: json.loads(text)
    return response


def raw_entry(entry_id: str, end: Any = "2024-03-04T11:00:00Z") -> dict[str, Any]:
    return {
        "id": entry_id,
        "projectId": "p1",
        "timeInterval": {"start": "2024-03-04T10:00:00Z", "end": end},
    }


class TestConvertTimeEntry(unittest.TestCase):
    def test_flat_entry(self) -> None:
        entry = convert_time_entry(
            {
                "id": "e1",
                "projectId": "p1",
                "taskId": "t1",
                "description": "Work on CAM-1",
                "tagIds": ["tag1"],
                "timeInterval": {"start": "2024-03-04T10:00:00Z", "end": None},
            }
        )
        self.assertEqual(entry["project_id"], "p1")
        self.assertEqual(entry["task_id"], "t1")
        self.assertIsNone(entry["end"])
        self.assertIsNone(entry["project_name"])
        self.assertEqual(entry["tags"], ["tag1"])

    def test_hydrated_entry(self) -> None:
        entry = convert_time_entry(
            {
                "id": "e2",
                "project": {"id": "p1", "name": "Website"},
                "task": {"id": "t1", "name": "CAM-1 Login"},
                "tags": [{"id": "x", "name": "backend"}],
                "timeInterval": {
                    "start": "2024-03-04T10:00:00Z",
                    "end": "2024-03-04T11:30:00Z",
                },
            }
        )
        self.assertEqual(entry["project_id"], "p1")
        self.assertEqual(entry["project_name"], "Website")
        self.assertEqual(entry["task_name"], "CAM-1 Login")
        self.assertEqual(entry["tags"], ["backend"])
        self.assertEqual(entry["end"], pendulum.datetime(2024, 3, 4, 11, 30, tz="UTC"))
        self.assertEqual(entry["description"], "")

    def test_task_status_defaults_to_active(self) -> None:
        task = convert_task({"id": "t1", "name": "CAM-1"}, "p1")
        self.assertEqual(task["status"], "ACTIVE")
        self.assertEqual(task["project_id"], "p1")


class TestClockifyClient(unittest.TestCase):
    def setUp(self) -> None:
        self.session = mock.Mock()
        self.session.headers = {}
        self.client = ClockifyClient("key\u200b\n", "ws1", session=self.session)

    def test_api_key_is_cleaned(self) -> None:
        self.assertEqual(self.session.headers["X-Api-Key"], "key")

    def test_pagination_stops_on_short_page(self) -> None:
        full_page = [raw_entry(f"e{i}") for i in range(MAX_PAGE_SIZE)]
        self.session.request.side_effect = [
            make_response(200, full_page),
            make_response(200, [raw_entry("last")]),
        ]

        entries = self.client.list_entries_in_range(
            "u1",
            pendulum.datetime(2024, 3, 4, tz="UTC"),
            pendulum.datetime(2024, 3, 5, tz="UTC"),
        )

        self.assertEqual(len(entries), MAX_PAGE_SIZE + 1)
        self.assertEqual(self.session.request.call_count, 2)
        second_call = self.session.request.call_args_list[1]
        self.assertEqual(second_call.kwargs["params"]["page"], 2)
        self.assertEqual(second_call.kwargs["params"]["start"], "2024-03-04T00:00:00Z")
        self.assertEqual(second_call.kwargs["timeout"], 30)

    def test_current_entry_not_found_is_none(self) -> None:
        self.session.request.return_value = make_response(404, {"message": "not found"})
        self.assertIsNone(self.client.get_current_open_entry("u1"))

    def test_current_entry_empty_shapes(self) -> None:
        for body in (None, {}, []):
            with self.subTest(body=body):
                self.session.request.return_value = make_response(200, body)
                self.assertIsNone(self.client.get_current_open_entry("u1"))

    def test_current_entry_list_takes_first(self) -> None:
        self.session.request.return_value = make_response(200, [raw_entry("open", None)])
        entry = self.client.get_current_open_entry("u1")
        self.assertEqual(entry["id"], "open")  # type: ignore[index]
        self.assertIsNone(entry["end"])  # type: ignore[index]

    def test_error_status_raises_remote_unavailable(self) -> None:
        self.session.request.return_value = make_response(401, {"message": "bad key"})
        with self.assertRaises(RemoteUnavailable) as context:
            self.client.get_all_projects()
        self.assertEqual(context.exception.status_code, 401)
        self.assertIn("bad key", str(context.exception))

    def test_connection_errors_raise_remote_unavailable(self) -> None:
        self.session.request.side_effect = requests.exceptions.ConnectionError("down")
        with self.assertRaises(RemoteUnavailable):
            self.client.get_current_user()
        self.assertFalse(self.client.test_connection())

    def test_connection_succeeds_with_current_user(self) -> None:
        self.session.request.return_value = make_response(200, {"id": "u1", "name": "Ana"})
        self.assertTrue(self.client.test_connection())
        self.assertTrue(self.session.request.call_args.args[1].endswith("/user"))

    def test_create_time_entry_payload(self) -> None:
        self.session.request.return_value = make_response(201, raw_entry("new"))
        self.client.create_time_entry(
            {
                "start": pendulum.datetime(2024, 3, 4, 10, tz="UTC"),
                "end": pendulum.datetime(2024, 3, 4, 11, tz="UTC"),
                "project_id": "p1",
                "task_id": "t1",
                "description": "Work on CAM-1",
            }
        )
        call = self.session.request.call_args
        self.assertEqual(call.args[0], "POST")
        self.assertTrue(call.args[1].endswith("/workspaces/ws1/time-entries"))
        self.assertEqual(
            call.kwargs["json"],
            {
                "start": "2024-03-04T10:00:00Z",
                "end": "2024-03-04T11:00:00Z",
                "projectId": "p1",
                "taskId": "t1",
                "description": "Work on CAM-1",
            },
        )

    def test_create_time_entry_requires_id(self) -> None:
        self.session.request.return_value = make_response(201, {"projectId": "p1"})
        with self.assertRaises(RemoteUnavailable):
            self.client.create_time_entry(
                {
                    "start": pendulum.datetime(2024, 3, 4, 10, tz="UTC"),
                    "end": None,
                    "project_id": "p1",
                    "task_id": None,
                    "description": None,
                }
            )
