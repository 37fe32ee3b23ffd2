# SPDX-License-Identifier: MIT

import json
import tempfile
import unittest
from pathlib import Path

import pendulum

from clockwizard import state as app_state
from clockwizard.errors import ClockWizardError
from clockwizard.model.time_entry import TimeEntry
from clockwizard.service.report import aggregate
from clockwizard.view.export import (
    entries_rows,
    groups_to_json,
    report_rows,
    rows_to_csv,
    task_rows,
    write_csv,
)


def make_entry(entry_id: str, hour: int, minutes: int, task: str | None = None) -> TimeEntry:
    start = pendulum.datetime(2024, 3, 4, hour, 0, tz="UTC")
    return {
        "id": entry_id,
        "start": start,
        "end": start.add(minutes=minutes),
        "project_id": "p1",
        "project_name": "Website",
        "task_id": None,
        "task_name": task,
        "description": "Work, with comma",
        "tags": [],
        "billable": False,
    }


class TestExport(unittest.TestCase):
    def setUp(self) -> None:
        app_state.set_timezone("UTC")
        self.now = pendulum.datetime(2024, 3, 4, 18, 0, tz="UTC")
        self.entries = [make_entry("a", 9, 90, "CAM-1 Login"), make_entry("b", 13, 30)]

    def test_entries_rows(self) -> None:
        rows = entries_rows(self.entries, self.now)
        self.assertEqual(rows[0][0], "Date")
        self.assertEqual(
            rows[1],
            ["2024-03-04", "09:00:00", "10:30:00", "1h30m", "Website", "CAM-1 Login", "Work, with comma"],
        )
        self.assertEqual(rows[2][5], "")

    def test_entries_rows_with_week_label(self) -> None:
        rows = entries_rows(self.entries, self.now, "Week 10")
        self.assertEqual(rows[0][:2], ["Week", "Date"])
        self.assertEqual(rows[1][0], "Week 10")

    def test_report_rows_by_project(self) -> None:
        rows = report_rows(aggregate(self.entries, "project", self.now), "project")
        self.assertEqual(rows[0][0], "Project")
        self.assertEqual(rows[1], ["Website", 120, "2h", 2, 1])

    def test_report_rows_by_date(self) -> None:
        rows = report_rows(aggregate(self.entries, "date", self.now), "date")
        self.assertEqual(rows[0][-2:], ["First Entry", "Last Entry"])
        self.assertEqual(rows[1][-3:], [1, "09:00", "13:30"])

    def test_csv_quotes_commas(self) -> None:
        csv_text = rows_to_csv(entries_rows(self.entries[:1], self.now))
        self.assertIn('"Work, with comma"', csv_text)

    def test_groups_to_json(self) -> None:
        data = json.loads(groups_to_json(aggregate(self.entries, "project", self.now)))
        self.assertEqual(data[0]["key"], "Website")
        self.assertEqual(data[0]["minutes"], 120)
        self.assertEqual(data[0]["duration"], "2h")

    def test_task_rows(self) -> None:
        tasks = [{"id": "t1", "name": "CAM-1", "status": "ACTIVE", "project_id": "p9"}]
        rows = task_rows(tasks, {})  # type: ignore[arg-type]
        self.assertEqual(rows[1], ["t1", "CAM-1", "ACTIVE", "p9", ""])

    def test_write_csv(self) -> None:
        with tempfile.TemporaryDirectory() as directory:
            path = Path(directory) / "today.csv"
            write_csv(path, [["a", "b"], [1, 2]])
            self.assertEqual(path.read_text().splitlines(), ["a,b", "1,2"])

            with self.assertRaises(ClockWizardError):
                write_csv(Path(directory) / "missing" / "today.csv", [["a"]])
