# SPDX-License-Identifier: MIT

import csv
import io
import json
from pathlib import Path
from typing import Any, Optional

import pendulum

from clockwizard.errors import ClockWizardError
from clockwizard.model.project import Project, Task
from clockwizard.model.report import GroupBy, GroupSummary
from clockwizard.model.time_entry import TimeEntry
from clockwizard.parse import format_duration
from clockwizard.service.report import entry_end, entry_minutes, project_name
from clockwizard.time import datetime_to_display_time_str, to_local

Rows = list[list[Any]]


def entries_rows(
    entries: list[TimeEntry],
    now: pendulum.DateTime,
    week_label: Optional[str] = None,
) -> Rows:
    header = ["Date", "Start", "End", "Duration", "Project", "Task", "Description"]
    rows: Rows = [["Week", *header] if week_label is not None else header]
    for entry in entries:
        start = to_local(entry["start"])
        end = to_local(entry_end(entry, now))
        row = [
            start.format("YYYY-MM-DD"),
            start.format("HH:mm:ss"),
            end.format("HH:mm:ss"),
            format_duration(entry_minutes(entry, now)),
            project_name(entry),
            entry["task_name"] or "",
            entry["description"],
        ]
        rows.append([week_label, *row] if week_label is not None else row)
    return rows


def report_rows(groups: list[GroupSummary], group_by: GroupBy) -> Rows:
    match group_by:
        case "project":
            rows: Rows = [
                ["Project", "Duration (minutes)", "Duration (formatted)", "Entries", "Tasks"]
            ]
        case "task":
            rows = [["Project → Task", "Duration (minutes)", "Duration (formatted)", "Entries"]]
        case "date":
            rows = [
                [
                    "Date",
                    "Duration (minutes)",
                    "Duration (formatted)",
                    "Entries",
                    "Projects",
                    "First Entry",
                    "Last Entry",
                ]
            ]

    for group in groups:
        row: list[Any] = [
            group["key"],
            group["total_minutes"],
            format_duration(group["total_minutes"]),
            group["entry_count"],
        ]
        match group_by:
            case "project":
                row.append(len(group["task_minutes"]))
            case "date":
                row += [
                    len(group["project_minutes"]),
                    datetime_to_display_time_str(group["first_start"]),
                    datetime_to_display_time_str(group["last_end"]),
                ]
        rows.append(row)
    return rows


def task_rows(tasks: list[Task], projects: dict[str, Project]) -> Rows:
    rows: Rows = [["Task ID", "Task Name", "Status", "Project ID", "Project Name"]]
    for task in tasks:
        project = projects.get(task["project_id"])
        rows.append(
            [
                task["id"],
                task["name"],
                task["status"],
                task["project_id"],
                project["name"] if project else "",
            ]
        )
    return rows


def rows_to_csv(rows: Rows) -> str:
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerows(rows)
    return buffer.getvalue()


def write_csv(path: Path, rows: Rows) -> None:
    try:
        with path.open("w", newline="", encoding="utf-8") as file:
            csv.writer(file).writerows(rows)
    except OSError as e:
        raise ClockWizardError(f"Cannot create file {path}: {e.strerror}")


def groups_to_json(groups: list[GroupSummary]) -> str:
    data = [
        {
            "key": group["key"],
            "minutes": group["total_minutes"],
            "duration": format_duration(group["total_minutes"]),
            "entries": group["entry_count"],
            "first_start": group["first_start"].to_iso8601_string(),
            "last_end": group["last_end"].to_iso8601_string(),
            "projects": group["project_minutes"],
            "tasks": group["task_minutes"],
        }
        for group in groups
    ]
    return json.dumps(data, indent=2, ensure_ascii=False)


def tasks_to_json(tasks: list[Task], projects: dict[str, Project]) -> str:
    data = [
        {
            **task,
            "project_name": projects[task["project_id"]]["name"]
            if task["project_id"] in projects
            else None,
        }
        for task in tasks
    ]
    return json.dumps(data, indent=2, ensure_ascii=False)


def write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ClockWizardError(f"Cannot create file {path}: {e.strerror}")
