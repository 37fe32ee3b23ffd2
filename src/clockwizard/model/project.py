# SPDX-License-Identifier: MIT

from typing import Literal, Optional, TypedDict

TaskStatus = Literal["ACTIVE", "DONE"]

TASK_STATUSES: tuple[TaskStatus, ...] = ("ACTIVE", "DONE")


class Project(TypedDict):
    id: str
    name: str
    color: Optional[str]
    archived: bool


class Task(TypedDict):
    id: str
    name: str
    status: TaskStatus
    project_id: str
