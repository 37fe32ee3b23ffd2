# SPDX-License-Identifier: MIT

from typing import Any, Optional, cast

import pendulum

from clockwizard.state import get_timezone


def local_timezone() -> str:
    return get_timezone()


def now_utc() -> pendulum.DateTime:
    return pendulum.now("UTC")


def now_local() -> pendulum.DateTime:
    return pendulum.now(local_timezone())


def to_utc(local_datetime: pendulum.DateTime) -> pendulum.DateTime:
    return local_datetime.in_tz("UTC")


def to_local(utc_datetime: pendulum.DateTime) -> pendulum.DateTime:
    return utc_datetime.in_tz(local_timezone())


def is_valid_timezone(name: str) -> bool:
    try:
        pendulum.timezone(name)
    except (ValueError, KeyError):
        return False
    return True


def datetime_to_iso_str(datetime: pendulum.DateTime) -> str:
    """Render an instant the way Clockify expects it on the wire: UTC with Z."""
    return to_utc(datetime).format("YYYY-MM-DD[T]HH:mm:ss[Z]")


def datetime_from_str(datetime: str) -> pendulum.DateTime:
    parsed = cast(pendulum.DateTime, pendulum.parse(datetime))
    return to_utc(parsed)


def datetime_from_str_optional(datetime: Optional[Any]) -> Optional[pendulum.DateTime]:
    if datetime is None or datetime == "":
        return None
    return datetime_from_str(str(datetime))


def datetime_to_display_time_str(datetime: pendulum.DateTime) -> str:
    return to_local(datetime).format("HH:mm")


def datetime_to_display_time_str_optional(
    datetime: Optional[pendulum.DateTime],
) -> str:
    if datetime is None:
        return "-"
    return datetime_to_display_time_str(datetime)


def datetime_to_display_date_str(datetime: pendulum.DateTime) -> str:
    return to_local(datetime).format("YYYY-MM-DD")


def datetime_to_display_datetime_str(datetime: pendulum.DateTime) -> str:
    return to_local(datetime).format("YYYY-MM-DD HH:mm zz")


def datetime_to_local_date_key(datetime: pendulum.DateTime) -> str:
    return to_local(datetime).format("YYYY-MM-DD")


def timezone_info(now: Optional[pendulum.DateTime] = None) -> dict[str, Any]:
    local_now = to_local(now) if now is not None else now_local()
    return {
        "name": local_timezone(),
        "abbreviation": local_now.format("zz"),
        "offset": local_now.format("Z"),
        "is_dst": local_now.is_dst(),
    }
