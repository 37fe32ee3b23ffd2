# SPDX-License-Identifier: MIT

import unittest

import pendulum

from clockwizard import state as app_state
from clockwizard.time import (
    datetime_from_str,
    datetime_from_str_optional,
    datetime_to_display_time_str,
    datetime_to_iso_str,
    datetime_to_local_date_key,
    is_valid_timezone,
    to_local,
    to_utc,
)


class TestTime(unittest.TestCase):
    def setUp(self) -> None:
        app_state.set_timezone("America/Santiago")

    def test_wire_format_is_utc_with_z(self) -> None:
        local = pendulum.datetime(2024, 3, 4, 9, 30, tz="America/Santiago")
        self.assertEqual(datetime_to_iso_str(local), "2024-03-04T12:30:00Z")

    def test_parsed_instants_are_utc(self) -> None:
        parsed = datetime_from_str("2024-03-04T12:30:00Z")
        self.assertEqual(parsed.timezone_name, "UTC")
        self.assertEqual(datetime_to_iso_str(parsed), "2024-03-04T12:30:00Z")

    def test_offsets_are_normalized(self) -> None:
        parsed = datetime_from_str("2024-03-04T09:30:00-03:00")
        self.assertEqual(parsed, pendulum.datetime(2024, 3, 4, 12, 30, tz="UTC"))

    def test_optional_values(self) -> None:
        self.assertIsNone(datetime_from_str_optional(None))
        self.assertIsNone(datetime_from_str_optional(""))

    def test_display_uses_configured_timezone(self) -> None:
        instant = pendulum.datetime(2024, 3, 4, 2, 0, tz="UTC")
        self.assertEqual(datetime_to_display_time_str(instant), "23:00")
        self.assertEqual(datetime_to_local_date_key(instant), "2024-03-03")

    def test_timezone_validation(self) -> None:
        self.assertTrue(is_valid_timezone("America/Santiago"))
        self.assertFalse(is_valid_timezone("Mars/Olympus_Mons"))

    def test_conversions_round_trip_across_dst_changes(self) -> None:
        # Santiago leaves DST on 2024-04-07 and enters it on 2024-09-08
        utc_instants = [
            (pendulum.datetime(2024, 4, 6, 12, 30, tz="UTC"), -3),
            (pendulum.datetime(2024, 4, 7, 12, 30, tz="UTC"), -4),
            (pendulum.datetime(2024, 9, 7, 12, 30, tz="UTC"), -4),
            (pendulum.datetime(2024, 9, 8, 4, 30, tz="UTC"), -3),
        ]
        for instant, offset_hours in utc_instants:
            with self.subTest(instant=instant):
                local = to_local(instant)
                self.assertEqual(local.offset_hours, offset_hours)
                self.assertEqual(to_utc(local), instant)

        local_instants = [
            pendulum.datetime(2024, 4, 6, 9, 30, tz="America/Santiago"),
            pendulum.datetime(2024, 4, 7, 12, 0, tz="America/Santiago"),
            pendulum.datetime(2024, 9, 7, 12, 0, tz="America/Santiago"),
            pendulum.datetime(2024, 9, 8, 12, 0, tz="America/Santiago"),
        ]
        for local in local_instants:
            with self.subTest(local=local):
                utc = to_utc(local)
                self.assertEqual(utc.timezone_name, "UTC")
                self.assertEqual(to_local(utc), local)
