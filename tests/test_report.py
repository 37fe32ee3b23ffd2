# SPDX-License-Identifier: MIT

import unittest
from typing import Optional

import pendulum

from clockwizard import state as app_state
from clockwizard.errors import InvalidFormat
from clockwizard.model.time_entry import TimeEntry
from clockwizard.service.report import (
    aggregate,
    daily_breakdown,
    days_worked,
    detect_gaps,
    filter_by_project,
    percentage,
    period_range,
    summarize_period,
    total_minutes,
    week_range,
    weekly_progress,
    working_days,
)


def make_entry(
    start: pendulum.DateTime,
    end: Optional[pendulum.DateTime],
    project: str = "Website",
    task: Optional[str] = None,
    entry_id: str = "e1",
) -> TimeEntry:
    return {
        "id": entry_id,
        "start": start,
        "end": end,
        "project_id": f"p-{project.lower()}",
        "project_name": project,
        "task_id": None,
        "task_name": task,
        "description": "",
        "tags": [],
        "billable": False,
    }


def at(hour: int, minute: int = 0, day: int = 4) -> pendulum.DateTime:
    return pendulum.datetime(2024, 3, day, hour, minute, tz="UTC")


class TestAggregation(unittest.TestCase):
    def setUp(self) -> None:
        app_state.set_timezone("UTC")

    def test_day_with_gap(self) -> None:
        entries = [
            make_entry(at(9), at(9, 15), entry_id="a"),
            make_entry(at(9, 45), at(10, 15), entry_id="b"),
        ]
        self.assertEqual(total_minutes(entries), 45)

        gaps = detect_gaps(entries)
        self.assertEqual(len(gaps), 1)
        self.assertEqual(gaps[0]["minutes"], 30)
        self.assertEqual(gaps[0]["start"], at(9, 15))
        self.assertEqual(gaps[0]["end"], at(9, 45))

    def test_short_and_overlapping_gaps_are_ignored(self) -> None:
        entries = [
            make_entry(at(9), at(10), entry_id="a"),
            make_entry(at(10, 15), at(11), entry_id="b"),
            make_entry(at(10, 50), at(12), entry_id="c"),
        ]
        self.assertEqual(detect_gaps(entries), [])

    def test_running_entry_counts_until_now(self) -> None:
        now = at(12)
        entries = [make_entry(now.subtract(minutes=90), None)]
        self.assertEqual(total_minutes(entries, now), 90)

    def test_groups_are_ordered_by_total_then_first_seen(self) -> None:
        entries = [
            make_entry(at(8), at(9), project="Alpha", entry_id="a"),
            make_entry(at(9), at(11), project="Beta", entry_id="b"),
            make_entry(at(11), at(12), project="Gamma", entry_id="c"),
        ]
        groups = aggregate(entries, "project", at(13))
        self.assertEqual([g["key"] for g in groups], ["Beta", "Alpha", "Gamma"])
        self.assertEqual(groups[0]["total_minutes"], 120)

    def test_task_grouping_key(self) -> None:
        entries = [
            make_entry(at(8), at(9), task="CAM-1 Login", entry_id="a"),
            make_entry(at(9), at(10), entry_id="b"),
        ]
        keys = {g["key"] for g in aggregate(entries, "task", at(13))}
        self.assertEqual(keys, {"Website → CAM-1 Login", "Website → No task"})

    def test_date_grouping_uses_local_day(self) -> None:
        app_state.set_timezone("America/Santiago")
        entries = [make_entry(at(2), at(3), entry_id="a")]
        group = aggregate(entries, "date", at(13))[0]
        self.assertTrue(group["key"].startswith("2024-03-03"))

    def test_project_filter_matches_substring(self) -> None:
        entries = [
            make_entry(at(8), at(9), project="Website", entry_id="a"),
            make_entry(at(9), at(10), project="Mobile App", entry_id="b"),
        ]
        self.assertEqual([e["id"] for e in filter_by_project(entries, "mobile")], ["b"])
        self.assertEqual(len(filter_by_project(entries, None)), 2)


class TestWeeklyProgress(unittest.TestCase):
    def test_half_way(self) -> None:
        progress = weekly_progress(1200)
        self.assertEqual(progress["percentage"], 50)
        self.assertEqual(progress["band"], "remaining")
        self.assertEqual(progress["remaining_minutes"], 1200)

    def test_bands(self) -> None:
        self.assertEqual(weekly_progress(1920)["band"], "close")
        self.assertEqual(weekly_progress(2400)["band"], "achieved")
        self.assertEqual(weekly_progress(2600)["remaining_minutes"], 0)

    def test_percentage_rounds_half_up(self) -> None:
        self.assertEqual(percentage(1, 8), 13)
        self.assertEqual(percentage(1, 3), 33)
        self.assertEqual(percentage(5, 0), 0)


class TestPeriods(unittest.TestCase):
    def setUp(self) -> None:
        app_state.set_timezone("UTC")
        # A Wednesday
        self.now = pendulum.datetime(2024, 3, 6, 15, 0, tz="UTC")

    def test_week_starts_on_monday(self) -> None:
        start, end = period_range("week", now=self.now)
        self.assertEqual(start, pendulum.datetime(2024, 3, 4, tz="UTC"))
        self.assertEqual(end.date(), pendulum.date(2024, 3, 10))

    def test_week_offset(self) -> None:
        start, _ = week_range(-1, self.now)
        self.assertEqual(start, pendulum.datetime(2024, 2, 26, tz="UTC"))

    def test_custom_period(self) -> None:
        start, end = period_range("custom", "2024-03-01", "2024-03-03", self.now)
        self.assertEqual(start, pendulum.datetime(2024, 3, 1, tz="UTC"))
        self.assertEqual(end.date(), pendulum.date(2024, 3, 3))

    def test_custom_period_errors(self) -> None:
        with self.assertRaises(InvalidFormat):
            period_range("custom", "2024-03-01", None, self.now)
        with self.assertRaises(InvalidFormat):
            period_range("custom", "2024-03-05", "2024-03-01", self.now)
        with self.assertRaises(InvalidFormat):
            period_range("custom", "03/01/2024", "2024-03-05", self.now)
        with self.assertRaises(InvalidFormat):
            period_range("year", now=self.now)

    def test_working_days_and_daily_breakdown(self) -> None:
        start, end = week_range(0, self.now)
        self.assertEqual(working_days(start, end), 5)

        entries = [
            make_entry(at(9, day=4), at(10, day=4), entry_id="a"),
            make_entry(at(11, day=4), at(12, day=4), entry_id="b"),
            make_entry(at(9, day=9), at(9, 30, day=9), entry_id="c"),
        ]
        self.assertEqual(days_worked(entries), 2)

        days = daily_breakdown(entries, start, self.now)
        self.assertEqual(len(days), 7)
        self.assertEqual(days[0]["total_minutes"], 120)
        self.assertEqual(days[0]["first_start"], at(9, day=4))
        self.assertEqual(days[0]["last_end"], at(12, day=4))
        self.assertIsNone(days[1]["first_start"])
        self.assertFalse(days[5]["is_working_day"])
        self.assertEqual(days[5]["total_minutes"], 30)

    def test_period_summary(self) -> None:
        start, end = period_range("custom", "2024-03-04", "2024-03-07", self.now)
        entries = [
            make_entry(at(9, day=4), at(11, day=4), project="A", task="T1", entry_id="a"),
            make_entry(at(9, day=5), at(11, day=5), project="B", entry_id="b"),
        ]
        summary = summarize_period(entries, start, end, self.now)
        self.assertEqual(summary["days_in_period"], 4)
        self.assertEqual(summary["total_minutes"], 240)
        self.assertEqual(summary["average_minutes_per_day"], 60)
        self.assertEqual(summary["project_count"], 2)
        self.assertEqual(summary["task_count"], 1)
