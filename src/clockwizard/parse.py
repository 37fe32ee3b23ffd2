# SPDX-License-Identifier: MIT

import re
from decimal import Decimal
from typing import Any, Optional

import pendulum

from clockwizard.errors import InvalidFormat, InvalidRange
from clockwizard.model.time_entry import TimeInterval
from clockwizard.time import now_local, now_utc, to_local, to_utc

_HOURS_AND_MINUTES = re.compile(r"^(\d+(?:\.\d+)?)h(\d+)m$")
_HOURS_ONLY = re.compile(r"^(\d+(?:\.\d+)?)h$")
_MINUTES_ONLY = re.compile(r"^(\d+)m$")
_BARE_HOURS = re.compile(r"^(\d+(?:\.\d+)?)$")

_CLOCK_12_HOUR = re.compile(r"^(\d{1,2}):(\d{2})(am|pm)$")
_CLOCK_24_HOUR = re.compile(r"^(\d{1,2}):(\d{2})$")
_HOUR_12 = re.compile(r"^(\d{1,2})(am|pm)$")

WORK_START_TIMES = ["8:00am", "8:30am", "9:00am", "9:30am", "10:00am"]


def parse_duration(duration: str) -> int:
    """
    Parse a free-form duration into whole minutes.

    Accepts 1h30m, 1.5h, 2h, 90m and bare numbers. A bare number is read as
    hours, so "2" is 120 minutes.

    Raises:
        InvalidFormat: If the string matches none of the accepted patterns
    """
    normalized = re.sub(r"\s+", "", duration).lower()

    match = _HOURS_AND_MINUTES.match(normalized)
    if match:
        return int(Decimal(match.group(1)) * 60 + int(match.group(2)))

    match = _HOURS_ONLY.match(normalized)
    if match:
        return int(Decimal(match.group(1)) * 60)

    match = _MINUTES_ONLY.match(normalized)
    if match:
        return int(match.group(1))

    match = _BARE_HOURS.match(normalized)
    if match:
        return int(Decimal(match.group(1)) * 60)

    raise InvalidFormat(
        f"Invalid duration format: '{duration}'. Use formats like '1h', '30m', '1.5h', '1h30m'"
    )


def _to_24_hour(hour: int, meridiem: str) -> int:
    if meridiem == "pm" and hour != 12:
        return hour + 12
    if meridiem == "am" and hour == 12:
        return 0
    return hour


def parse_clock_time(
    time_str: str, reference: Optional[pendulum.DateTime] = None
) -> pendulum.DateTime:
    """
    Parse a wall-clock time on the reference day in the configured timezone.

    Accepts 9:30am, 14:30, 2pm and "now". The result is returned in UTC.

    Raises:
        InvalidFormat: If the string is not a recognised clock time
    """
    normalized = re.sub(r"\s+", "", time_str).lower()
    if normalized == "now":
        return now_utc()

    hour: Optional[int] = None
    minute = 0

    match = _CLOCK_12_HOUR.match(normalized)
    if match:
        hour = _to_24_hour(int(match.group(1)), match.group(3))
        minute = int(match.group(2))
        if int(match.group(1)) > 12:
            hour = None
    else:
        match = _CLOCK_24_HOUR.match(normalized)
        if match:
            hour = int(match.group(1))
            minute = int(match.group(2))
        else:
            match = _HOUR_12.match(normalized)
            if match and int(match.group(1)) <= 12:
                hour = _to_24_hour(int(match.group(1)), match.group(2))

    if hour is None or hour > 23 or minute > 59:
        raise InvalidFormat(
            f"Invalid time format: '{time_str}'. Use formats like '9:30am', '14:30', '2pm' or 'now'"
        )

    local_reference = to_local(reference) if reference is not None else now_local()
    local_time = local_reference.set(hour=hour, minute=minute, second=0, microsecond=0)
    return to_utc(local_time)


def interval_from_duration(
    duration: str, end: Optional[pendulum.DateTime] = None
) -> TimeInterval:
    minutes = parse_duration(duration)
    if minutes <= 0:
        raise InvalidFormat(f"Duration must be greater than zero: '{duration}'")
    end_time = end if end is not None else now_utc()
    return {"start": end_time.subtract(minutes=minutes), "end": end_time}


def interval_from_clock_times(
    start: str, end: str, reference: Optional[pendulum.DateTime] = None
) -> TimeInterval:
    start_time = parse_clock_time(start, reference)
    end_time = parse_clock_time(end, reference)
    if start_time >= end_time:
        raise InvalidRange(
            f"Start time ({start}) must be before end time ({end})"
        )
    return {"start": start_time, "end": end_time}


def interval_minutes(
    interval: Any, now: Optional[pendulum.DateTime] = None
) -> int:
    """Whole minutes covered by an interval; open intervals run until now."""
    end = interval["end"]
    if end is None:
        end = now if now is not None else now_utc()
    seconds = abs((end - interval["start"]).total_seconds())
    return int(seconds // 60)


def format_duration(minutes: int | float) -> str:
    minutes = int(minutes)
    if minutes < 60:
        return f"{minutes}m"
    hours, remaining_minutes = divmod(minutes, 60)
    if remaining_minutes == 0:
        return f"{hours}h"
    return f"{hours}h{remaining_minutes}m"


def duration_suggestions() -> dict[str, str]:
    return {
        "30m": "30 minutes",
        "1h": "1 hour",
        "1h30m": "1.5 hours",
        "2h": "2 hours",
        "3h": "3 hours",
        "4h": "4 hours",
        "6h": "6 hours",
        "8h": "8 hours",
    }


def smart_start_suggestions(
    now: Optional[pendulum.DateTime] = None,
) -> list[dict[str, Any]]:
    """Suggest logging from common work start times earlier today."""
    current = now if now is not None else now_utc()
    suggestions = []
    for start_text in WORK_START_TIMES:
        start = parse_clock_time(start_text, current)
        if start >= current:
            continue
        minutes = interval_minutes({"start": start, "end": current})
        if 0 < minutes <= 720:
            suggestions.append(
                {
                    "label": f"Since {start_text}",
                    "start": start,
                    "minutes": minutes,
                    "duration": format_duration(minutes),
                }
            )
    return suggestions


def interval_from_log_options(
    duration: Optional[str],
    start: Optional[str],
    end: Optional[str],
    now: Optional[pendulum.DateTime] = None,
) -> TimeInterval:
    """
    Build the interval to log from either a duration ending now or a start/end pair.

    Raises:
        InvalidFormat: If both or neither forms are given, or either is malformed
        InvalidRange: If start is not before end
    """
    if duration and (start or end):
        raise InvalidFormat("Cannot specify both duration and start/end times")
    if duration:
        return interval_from_duration(duration, now)
    if start and end:
        return interval_from_clock_times(start, end, now)
    raise InvalidFormat("Must specify either duration or start/end times")
