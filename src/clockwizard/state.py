# SPDX-License-Identifier: MIT

from contextvars import ContextVar

from clockwizard.configuration import DEFAULT_TIMEZONE

_timezone: ContextVar[str] = ContextVar("timezone", default=DEFAULT_TIMEZONE)
_assume_yes: ContextVar[bool] = ContextVar("assume_yes", default=False)
_verbose: ContextVar[bool] = ContextVar("verbose", default=False)
_show_header: ContextVar[bool] = ContextVar("show_header", default=True)


def set_timezone(value: str) -> None:
    _timezone.set(value)


def get_timezone() -> str:
    return _timezone.get()


def set_assume_yes(value: bool) -> None:
    _assume_yes.set(value)


def get_assume_yes() -> bool:
    return _assume_yes.get()


def set_verbose(value: bool) -> None:
    _verbose.set(value)


def get_verbose() -> bool:
    return _verbose.get()


def set_show_header(value: bool) -> None:
    _show_header.set(value)


def get_show_header() -> bool:
    return _show_header.get()
