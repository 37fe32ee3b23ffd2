# SPDX-License-Identifier: MIT

import unittest

import pendulum

from clockwizard import state as app_state
from clockwizard.errors import InvalidFormat, InvalidRange
from clockwizard.parse import (
    format_duration,
    interval_from_clock_times,
    interval_from_duration,
    interval_from_log_options,
    interval_minutes,
    parse_clock_time,
    parse_duration,
    smart_start_suggestions,
)


class TestParseDuration(unittest.TestCase):
    def test_accepted_forms(self) -> None:
        self.assertEqual(parse_duration("2h"), 120)
        self.assertEqual(parse_duration("1h30m"), 90)
        self.assertEqual(parse_duration("90m"), 90)
        self.assertEqual(parse_duration("1.5h"), 90)
        self.assertEqual(parse_duration("2"), 120)

    def test_whitespace_and_case_are_ignored(self) -> None:
        self.assertEqual(parse_duration(" 1H 30M "), 90)

    def test_fractional_hours_are_exact(self) -> None:
        self.assertEqual(parse_duration("2.3h"), 138)
        self.assertEqual(parse_duration("0.1h"), 6)

    def test_rejects_malformed_input(self) -> None:
        for value in ("abc", "h30", "", "1h30", "-2h", "1.5m"):
            with self.subTest(value=value):
                with self.assertRaises(InvalidFormat):
                    parse_duration(value)


class TestParseClockTime(unittest.TestCase):
    def setUp(self) -> None:
        app_state.set_timezone("UTC")
        self.reference = pendulum.datetime(2024, 3, 4, 18, 0, tz="UTC")

    def test_twelve_and_twenty_four_hour_clock(self) -> None:
        self.assertEqual(
            parse_clock_time("9:30am", self.reference),
            pendulum.datetime(2024, 3, 4, 9, 30, tz="UTC"),
        )
        self.assertEqual(
            parse_clock_time("14:30", self.reference),
            pendulum.datetime(2024, 3, 4, 14, 30, tz="UTC"),
        )
        self.assertEqual(
            parse_clock_time("2pm", self.reference),
            pendulum.datetime(2024, 3, 4, 14, 0, tz="UTC"),
        )

    def test_noon_and_midnight(self) -> None:
        self.assertEqual(parse_clock_time("12pm", self.reference).hour, 12)
        self.assertEqual(parse_clock_time("12:15am", self.reference).hour, 0)

    def test_uses_configured_timezone(self) -> None:
        app_state.set_timezone("America/Santiago")
        # Santiago is UTC-3 in March (summer time)
        parsed = parse_clock_time("9:00", self.reference)
        self.assertEqual(parsed, pendulum.datetime(2024, 3, 4, 12, 0, tz="UTC"))

    def test_rejects_malformed_input(self) -> None:
        for value in ("25:00", "13pm", "9:75", "noon", "9.30"):
            with self.subTest(value=value):
                with self.assertRaises(InvalidFormat):
                    parse_clock_time(value, self.reference)


class TestIntervals(unittest.TestCase):
    def setUp(self) -> None:
        app_state.set_timezone("UTC")
        self.now = pendulum.datetime(2024, 3, 4, 18, 0, tz="UTC")

    def test_duration_ends_at_reference(self) -> None:
        interval = interval_from_duration("1h30m", self.now)
        self.assertEqual(interval["end"], self.now)
        self.assertEqual(interval["start"], pendulum.datetime(2024, 3, 4, 16, 30, tz="UTC"))

    def test_clock_times_must_be_ordered(self) -> None:
        interval = interval_from_clock_times("9am", "11:30am", self.now)
        self.assertEqual(interval_minutes(interval), 150)
        with self.assertRaises(InvalidRange):
            interval_from_clock_times("11am", "9am", self.now)

    def test_log_options_reject_both_forms(self) -> None:
        with self.assertRaises(InvalidFormat) as context:
            interval_from_log_options("2h", "9am", None, self.now)
        self.assertIn("Cannot specify both", str(context.exception))

    def test_log_options_need_one_form(self) -> None:
        with self.assertRaises(InvalidFormat):
            interval_from_log_options(None, "9am", None, self.now)
        interval = interval_from_log_options(None, "9am", "10am", self.now)
        self.assertEqual(interval_minutes(interval), 60)

    def test_zero_length_durations_are_rejected(self) -> None:
        self.assertEqual(parse_duration("0m"), 0)
        for duration in ("0", "0m", "0h0m", "0.001h"):
            with self.subTest(duration=duration):
                with self.assertRaises(InvalidFormat):
                    interval_from_log_options(duration, None, None, self.now)

    def test_open_interval_runs_until_now(self) -> None:
        start = self.now.subtract(minutes=90)
        self.assertEqual(interval_minutes({"start": start, "end": None}, self.now), 90)

    def test_minutes_are_absolute_and_floored(self) -> None:
        start = self.now
        end = self.now.subtract(minutes=10, seconds=59)
        self.assertEqual(interval_minutes({"start": start, "end": end}), 10)

    def test_smart_suggestions_only_cover_the_past(self) -> None:
        now = pendulum.datetime(2024, 3, 4, 9, 15, tz="UTC")
        suggestions = smart_start_suggestions(now)
        self.assertEqual([s["label"] for s in suggestions], ["Since 8:00am", "Since 8:30am", "Since 9:00am"])
        self.assertEqual(suggestions[0]["minutes"], 75)


class TestFormatDuration(unittest.TestCase):
    def test_format(self) -> None:
        self.assertEqual(format_duration(45), "45m")
        self.assertEqual(format_duration(60), "1h")
        self.assertEqual(format_duration(135), "2h15m")
