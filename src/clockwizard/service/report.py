# SPDX-License-Identifier: MIT

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import pendulum

from clockwizard.errors import InvalidFormat
from clockwizard.model.report import (
    PERIOD_OPTIONS,
    DaySummary,
    Gap,
    GroupBy,
    GroupSummary,
    PeriodSummary,
    WeeklyProgress,
)
from clockwizard.model.time_entry import TimeEntry
from clockwizard.parse import interval_minutes
from clockwizard.time import (
    datetime_to_local_date_key,
    local_timezone,
    now_utc,
    to_local,
    to_utc,
)

WEEKLY_TARGET_MINUTES = 2400
GAP_THRESHOLD_MINUTES = 15

UNKNOWN_PROJECT = "Unknown Project"
NO_TASK = "No task"


def entry_minutes(entry: TimeEntry, now: Optional[pendulum.DateTime] = None) -> int:
    return interval_minutes(entry, now)


def entry_end(entry: TimeEntry, now: Optional[pendulum.DateTime] = None) -> pendulum.DateTime:
    if entry["end"] is not None:
        return entry["end"]
    return now if now is not None else now_utc()


def project_name(entry: TimeEntry) -> str:
    return entry["project_name"] or UNKNOWN_PROJECT


def group_key(entry: TimeEntry, group_by: GroupBy) -> str:
    match group_by:
        case "project":
            return project_name(entry)
        case "task":
            return f"{project_name(entry)} → {entry['task_name'] or NO_TASK}"
        case "date":
            return to_local(entry["start"]).format("YYYY-MM-DD (ddd, MMM D)")
    raise InvalidFormat(f"Invalid group-by option: '{group_by}'. Use: project, task or date")


def aggregate(
    entries: list[TimeEntry],
    group_by: GroupBy,
    now: Optional[pendulum.DateTime] = None,
) -> list[GroupSummary]:
    """
    Group entries by project, task or local date.

    Groups come back ordered by total time, largest first; groups with equal
    totals keep the order in which they were first seen.
    """
    current = now if now is not None else now_utc()
    groups: dict[str, GroupSummary] = {}

    for entry in entries:
        key = group_key(entry, group_by)
        minutes = entry_minutes(entry, current)
        end = entry_end(entry, current)

        group = groups.get(key)
        if group is None:
            group = {
                "key": key,
                "total_minutes": 0,
                "entry_count": 0,
                "first_start": entry["start"],
                "last_end": end,
                "project_minutes": {},
                "task_minutes": {},
            }
            groups[key] = group

        group["total_minutes"] += minutes
        group["entry_count"] += 1
        group["first_start"] = min(group["first_start"], entry["start"])
        group["last_end"] = max(group["last_end"], end)

        project = project_name(entry)
        group["project_minutes"][project] = group["project_minutes"].get(project, 0) + minutes
        if entry["task_name"]:
            task = entry["task_name"]
            group["task_minutes"][task] = group["task_minutes"].get(task, 0) + minutes

    return sorted(groups.values(), key=lambda g: g["total_minutes"], reverse=True)


def total_minutes(
    entries: list[TimeEntry], now: Optional[pendulum.DateTime] = None
) -> int:
    current = now if now is not None else now_utc()
    return sum(entry_minutes(entry, current) for entry in entries)


def percentage(part: int, total: int) -> int:
    if total <= 0:
        return 0
    ratio = Decimal(part) * 100 / Decimal(total)
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def weekly_progress(
    total: int, target: int = WEEKLY_TARGET_MINUTES
) -> WeeklyProgress:
    percent = percentage(total, target)
    if percent >= 100:
        band = "achieved"
    elif percent >= 80:
        band = "close"
    else:
        band = "remaining"
    return {
        "total_minutes": total,
        "target_minutes": target,
        "percentage": percent,
        "band": band,
        "remaining_minutes": max(target - total, 0),
    }


def sort_timeline(entries: list[TimeEntry]) -> list[TimeEntry]:
    return sorted(entries, key=lambda e: e["start"])


def detect_gaps(
    entries: list[TimeEntry], threshold: int = GAP_THRESHOLD_MINUTES
) -> list[Gap]:
    """Untracked stretches between consecutive entries longer than threshold minutes."""
    gaps: list[Gap] = []
    timeline = sort_timeline(entries)
    for previous, following in zip(timeline, timeline[1:]):
        # A running entry has no end to measure from
        previous_end = previous["end"]
        if previous_end is None or following["start"] <= previous_end:
            continue
        minutes = interval_minutes({"start": previous_end, "end": following["start"]})
        if minutes > threshold:
            gaps.append({"start": previous_end, "end": following["start"], "minutes": minutes})
    return gaps


def is_working_day(datetime: pendulum.DateTime) -> bool:
    return to_local(datetime).isoweekday() <= 5


def working_days(start: pendulum.DateTime, end: pendulum.DateTime) -> int:
    day = to_local(start).start_of("day")
    last_day = to_local(end).start_of("day")
    count = 0
    while day <= last_day:
        if is_working_day(day):
            count += 1
        day = day.add(days=1)
    return count


def days_worked(entries: list[TimeEntry]) -> int:
    return len({datetime_to_local_date_key(entry["start"]) for entry in entries})


def daily_breakdown(
    entries: list[TimeEntry],
    week_start: pendulum.DateTime,
    now: Optional[pendulum.DateTime] = None,
) -> list[DaySummary]:
    current = now if now is not None else now_utc()
    first_day = to_local(week_start).start_of("day")

    days: list[DaySummary] = []
    for offset in range(7):
        day = first_day.add(days=offset)
        day_key = datetime_to_local_date_key(day)
        day_entries = [e for e in entries if datetime_to_local_date_key(e["start"]) == day_key]
        days.append(
            {
                "date": day,
                "total_minutes": total_minutes(day_entries, current),
                "entry_count": len(day_entries),
                "first_start": min((e["start"] for e in day_entries), default=None),
                "last_end": max((entry_end(e, current) for e in day_entries), default=None),
                "is_working_day": is_working_day(day),
            }
        )
    return days


def summarize_period(
    entries: list[TimeEntry],
    start: pendulum.DateTime,
    end: pendulum.DateTime,
    now: Optional[pendulum.DateTime] = None,
) -> PeriodSummary:
    total = total_minutes(entries, now)
    days_in_period = (to_local(end).date() - to_local(start).date()).days + 1
    return {
        "total_minutes": total,
        "entry_count": len(entries),
        "days_in_period": days_in_period,
        "average_minutes_per_day": total // days_in_period if days_in_period > 0 else 0,
        "project_count": len({project_name(e) for e in entries}),
        "task_count": len({e["task_name"] for e in entries if e["task_name"]}),
    }


def _parse_report_date(date_str: str, option: str) -> pendulum.DateTime:
    try:
        date = pendulum.from_format(date_str, "YYYY-MM-DD", tz=local_timezone())
    except ValueError:
        raise InvalidFormat(f"Invalid {option} date: '{date_str}'. Use YYYY-MM-DD")
    return date


def period_range(
    period: str,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    now: Optional[pendulum.DateTime] = None,
) -> tuple[pendulum.DateTime, pendulum.DateTime]:
    """
    Resolve a report period into a UTC [start, end] range.

    Weeks start on Monday. Custom periods take inclusive YYYY-MM-DD bounds.
    """
    local_now = to_local(now if now is not None else now_utc())

    match period:
        case "today":
            start = local_now.start_of("day")
            end = local_now.end_of("day")
        case "week":
            start = local_now.start_of("week")
            end = local_now.end_of("week")
        case "month":
            start = local_now.start_of("month")
            end = local_now.end_of("month")
        case "custom":
            if not start_date or not end_date:
                raise InvalidFormat("Custom period requires --start and --end dates")
            start = _parse_report_date(start_date, "start").start_of("day")
            end = _parse_report_date(end_date, "end").end_of("day")
            if start > end:
                raise InvalidFormat(
                    f"Start date ({start_date}) must not be after end date ({end_date})"
                )
        case _:
            raise InvalidFormat(
                f"Invalid period: '{period}'. Use: {', '.join(PERIOD_OPTIONS)}"
            )

    return to_utc(start), to_utc(end)


def week_range(
    week_offset: int = 0, now: Optional[pendulum.DateTime] = None
) -> tuple[pendulum.DateTime, pendulum.DateTime]:
    local_now = to_local(now if now is not None else now_utc()).add(weeks=week_offset)
    return to_utc(local_now.start_of("week")), to_utc(local_now.end_of("week"))


def filter_by_project(entries: list[TimeEntry], ref: Optional[str]) -> list[TimeEntry]:
    """Keep entries whose project id or name matches ref (names match on substring)."""
    if not ref:
        return list(entries)
    lowered = ref.lower()
    return [
        entry
        for entry in entries
        if entry["project_id"] == ref
        or project_name(entry) == ref
        or lowered in project_name(entry).lower()
    ]
