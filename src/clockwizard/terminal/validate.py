# SPDX-License-Identifier: MIT

from typing import Optional

import typer

from clockwizard.errors import InvalidFormat
from clockwizard.model.project import TASK_STATUSES
from clockwizard.model.report import GROUP_BY_OPTIONS, PERIOD_OPTIONS
from clockwizard.parse import parse_clock_time, parse_duration
from clockwizard.time import is_valid_timezone

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
REPORT_OUTPUTS = ("table", "csv", "json")
TASK_OUTPUTS = ("table", "json")


def __one_of(value: str, options: tuple[str, ...], label: str) -> str:
    if value not in options:
        raise typer.BadParameter(f"Invalid {label}: '{value}'. Use: {', '.join(options)}")
    return value


def validate_timezone(timezone: Optional[str]) -> Optional[str]:
    if timezone is None:
        return None
    if not is_valid_timezone(timezone):
        raise typer.BadParameter(f"Unknown timezone '{timezone}', e.g. America/Santiago")
    return timezone


def validate_log_level(log_level: Optional[str]) -> Optional[str]:
    if log_level is None:
        return None
    return __one_of(log_level.upper(), LOG_LEVELS, "log level")


def validate_duration(duration: Optional[str]) -> Optional[str]:
    if duration is None:
        return None
    try:
        parse_duration(duration)
    except InvalidFormat as e:
        raise typer.BadParameter(str(e))
    return duration


def validate_clock_time(time_str: Optional[str]) -> Optional[str]:
    if time_str is None:
        return None
    try:
        parse_clock_time(time_str)
    except InvalidFormat as e:
        raise typer.BadParameter(str(e))
    return time_str


def validate_period(period: str) -> str:
    return __one_of(period.lower(), PERIOD_OPTIONS, "period")


def validate_group_by(group_by: str) -> str:
    return __one_of(group_by.lower(), GROUP_BY_OPTIONS, "group-by option")


def validate_report_output(output: str) -> str:
    return __one_of(output.lower(), REPORT_OUTPUTS, "output format")


def validate_task_output(output: str) -> str:
    return __one_of(output.lower(), TASK_OUTPUTS, "output format")


def validate_task_status(status: Optional[str]) -> Optional[str]:
    if status is None:
        return None
    return __one_of(status.upper(), TASK_STATUSES, "task status")
