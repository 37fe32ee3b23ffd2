# SPDX-License-Identifier: MIT

from typing import Literal, Optional, TypedDict

import pendulum

GroupBy = Literal["project", "task", "date"]
GROUP_BY_OPTIONS: tuple[GroupBy, ...] = ("project", "task", "date")

Period = Literal["today", "week", "month", "custom"]
PERIOD_OPTIONS: tuple[Period, ...] = ("today", "week", "month", "custom")

TargetBand = Literal["achieved", "close", "remaining"]


class GroupSummary(TypedDict):
    key: str
    total_minutes: int
    entry_count: int
    first_start: pendulum.DateTime
    last_end: pendulum.DateTime
    project_minutes: dict[str, int]
    task_minutes: dict[str, int]


class DaySummary(TypedDict):
    date: pendulum.DateTime
    total_minutes: int
    entry_count: int
    first_start: Optional[pendulum.DateTime]
    last_end: Optional[pendulum.DateTime]
    is_working_day: bool


class Gap(TypedDict):
    start: pendulum.DateTime
    end: pendulum.DateTime
    minutes: int


class WeeklyProgress(TypedDict):
    total_minutes: int
    target_minutes: int
    percentage: int
    band: TargetBand
    remaining_minutes: int


class PeriodSummary(TypedDict):
    total_minutes: int
    entry_count: int
    days_in_period: int
    average_minutes_per_day: int
    project_count: int
    task_count: int
