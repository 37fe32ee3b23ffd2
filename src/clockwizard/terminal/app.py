# SPDX-License-Identifier: MIT

import logging
from typing import Annotated

import typer

from clockwizard import state as app_state
from clockwizard.errors import ClockWizardError
from clockwizard.terminal.configure import configure
from clockwizard.terminal.create_task import create_task
from clockwizard.terminal.custom_typer import WorkflowOrderedGroup
from clockwizard.terminal.list_tasks import list_tasks
from clockwizard.terminal.log import log
from clockwizard.terminal.reports import reports
from clockwizard.terminal.start import start
from clockwizard.terminal.status import status
from clockwizard.terminal.stop import stop
from clockwizard.terminal.today import today
from clockwizard.terminal.week import week
from clockwizard.view import message

logger = logging.getLogger(__name__)

app = typer.Typer(
    cls=WorkflowOrderedGroup,
    help="ClockWizard - Clockify time logging with Jira tickets in the CLI",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)
app.command(name="start, begin")(start)
app.command(name="stop, end")(stop)
app.command(name="log, l")(log)
app.command(name="today, t")(today)
app.command(name="week, w")(week)
app.command(name="reports, r")(reports)
app.command(name="create-task, ct")(create_task)
app.command(name="list-tasks, lt")(list_tasks)
app.command(name="status, info")(status)
app.command(name="configure, config")(configure)


@app.callback()
def main_callback(
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Answer yes to confirmations and skip other prompts",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Debug logging and tracebacks"),
    ] = False,
    no_header: Annotated[
        bool,
        typer.Option("--no-header", "-nh", help="Suppress the header"),
    ] = False,
) -> None:
    """
    ClockWizard - Clockify time logging with Jira tickets in the CLI

    Global options that apply to all commands.
    """
    if yes:
        app_state.set_assume_yes(True)
    if verbose:
        app_state.set_verbose(True)
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose output enabled")
    if no_header:
        app_state.set_show_header(False)


def run() -> None:
    try:
        app()
    except ClockWizardError as e:
        if app_state.get_verbose():
            message.error_console.print_exception()
        message.error(str(e))
        raise SystemExit(1)
    except Exception as e:
        if app_state.get_verbose():
            message.error_console.print_exception()
        message.error(f"Unexpected error: {e}")
        raise SystemExit(1)
