# SPDX-License-Identifier: MIT

from typing import Optional, Protocol, TypedDict

import pendulum


class ActiveTimerRecord(TypedDict):
    id: str
    project_name: Optional[str]
    task_name: Optional[str]
    project_id: Optional[str]
    task_id: Optional[str]
    start: pendulum.DateTime
    description: Optional[str]


class ActiveTimerStore(Protocol):
    def get_active_timer(self) -> Optional[ActiveTimerRecord]: ...

    def save_active_timer(self, record: ActiveTimerRecord) -> None: ...

    def clear_active_timer(self) -> None: ...


class ProjectMappingStore(Protocol):
    def get_project_mapping(self, project_key: str) -> Optional[str]: ...

    def add_project_mapping(self, project_key: str, project_id: str) -> None: ...
