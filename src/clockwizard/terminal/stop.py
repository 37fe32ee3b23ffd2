# SPDX-License-Identifier: MIT

import logging
from typing import Annotated, Optional

import typer

from clockwizard.model.timer import is_timer_running
from clockwizard.parse import parse_clock_time
from clockwizard.repository.configuration import CONFIGURATION_REPO
from clockwizard.terminal import prompt
from clockwizard.terminal.common import clockify_client, timer_service
from clockwizard.terminal.validate import validate_clock_time
from clockwizard.time import datetime_to_display_time_str
from clockwizard.view import message
from clockwizard.view.header import header
from clockwizard.view.timer import active_timer_view, stopped_view

logger = logging.getLogger(__name__)


def stop(
    at: Annotated[
        Optional[str],
        typer.Option(
            "--time",
            "-t",
            callback=validate_clock_time,
            help="Stop time, e.g. 17:30, 5:30pm or now",
        ),
    ] = None,
) -> None:
    """Stop the running timer."""
    header("stop timer")

    local_record = CONFIGURATION_REPO.get_active_timer()
    logger.debug("Local timer record: %s", local_record["id"] if local_record else None)

    timers = timer_service(clockify_client())
    status = timers.query()
    if status["warning"]:
        message.warning(status["warning"])

    if not is_timer_running(status):
        message.warning("No active timer found.")
        return

    active_timer_view(status)

    stop_time = parse_clock_time(at) if at is not None else None
    if stop_time is not None:
        message.info(f"Stopping at {datetime_to_display_time_str(stop_time)}")

    if not prompt.confirm("Stop this timer?", default=True):
        message.info("Timer stop cancelled.")
        return

    entry = timers.stop(stop_time, status)
    message.success("Timer stopped")
    stopped_view(entry)
