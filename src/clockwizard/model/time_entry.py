# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

import pendulum


class TimeInterval(TypedDict):
    start: pendulum.DateTime
    end: Optional[pendulum.DateTime]


class TimeEntry(TypedDict):
    id: str
    start: pendulum.DateTime
    end: Optional[pendulum.DateTime]
    project_id: Optional[str]
    project_name: Optional[str]
    task_id: Optional[str]
    task_name: Optional[str]
    description: str
    tags: list[str]
    billable: bool


class NewTimeEntry(TypedDict):
    start: pendulum.DateTime
    end: Optional[pendulum.DateTime]
    project_id: str
    task_id: Optional[str]
    description: Optional[str]


def is_running(entry: TimeEntry) -> bool:
    return entry["end"] is None
