# SPDX-License-Identifier: MIT

from enum import Enum
from typing import Optional, TypedDict

from clockwizard.model.time_entry import TimeEntry


class TimerState(Enum):
    NO_TIMER = "no_timer"
    RUNNING_REMOTE = "running_remote"
    RUNNING_LOCAL_ONLY = "running_local_only"
    RECONCILED = "reconciled"


class TimerStatus(TypedDict):
    state: TimerState
    entry: Optional[TimeEntry]
    remote_ok: bool
    warning: Optional[str]


def is_timer_running(status: TimerStatus) -> bool:
    return status["entry"] is not None
