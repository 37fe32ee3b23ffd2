# SPDX-License-Identifier: MIT

import logging
from typing import Annotated, Optional

import typer

from clockwizard import state as app_state
from clockwizard.client.clockify import ClockifyClient
from clockwizard.client.jira import JiraClient
from clockwizard.errors import ClockWizardError, ConfigurationMissing, RemoteUnavailable
from clockwizard.repository.configuration import CONFIGURATION_REPO
from clockwizard.terminal import prompt
from clockwizard.terminal.validate import (
    validate_duration,
    validate_log_level,
    validate_timezone,
)
from clockwizard.view import message
from clockwizard.view.header import header
from clockwizard.view.status import configuration_view, mappings_view

logger = logging.getLogger(__name__)

CLOCKIFY_KEY_URL = "https://clockify.me/user/settings"
JIRA_TOKEN_URL = "https://id.atlassian.com/manage-profile/security/api-tokens"


def __configure_clockify(api_key: Optional[str], workspace_id: Optional[str]) -> None:
    current = CONFIGURATION_REPO.get_config()["clockify"]

    if api_key is None:
        message.info(f"Get your API key from {CLOCKIFY_KEY_URL}")
        api_key = prompt.ask(
            "Clockify API key", default=current["api_key"] or None, hide_input=True
        )
    if not api_key:
        raise ConfigurationMissing("Clockify API key is required")

    client = ClockifyClient(api_key, workspace_id or current["workspace_id"])
    try:
        user = client.get_current_user()
        workspaces = client.get_workspaces()
    except RemoteUnavailable as e:
        raise ClockWizardError(f"Invalid Clockify API key: {e}")
    message.success(f"API key is valid, signed in as {user['name'] or user['email']}")

    if workspace_id is None:
        if len(workspaces) == 1:
            workspace_id = workspaces[0]["id"]
        else:
            index = prompt.choose(
                "Select workspace", [f"{w['name']} ({w['id']})" for w in workspaces]
            )
            if index is not None:
                workspace_id = workspaces[index]["id"]
            else:
                workspace_id = current["workspace_id"] or user["default_workspace"]
    if not workspace_id:
        raise ConfigurationMissing("No Clockify workspace selected")

    CONFIGURATION_REPO.update_config(
        clockify_api_key=api_key,
        clockify_workspace_id=workspace_id,
        clockify_user_id=user["id"],
    )


def __configure_jira(
    url: Optional[str], email: Optional[str], token: Optional[str]
) -> None:
    current = CONFIGURATION_REPO.get_config()["jira"]

    if url is None and email is None and token is None:
        if CONFIGURATION_REPO.has_jira_config():
            message.info(f"Jira is configured for {current['email']} at {current['url']}")
            if not prompt.confirm("Update Jira configuration?", default=False):
                return
        elif not prompt.confirm("Configure Jira integration?", default=True):
            message.info("Skipping Jira configuration.")
            return

        message.info(f"Get your API token from {JIRA_TOKEN_URL}")
        url = prompt.ask(
            "Jira URL (e.g. https://company.atlassian.net)", default=current["url"] or None
        )
        if not url:
            message.info("Skipping Jira configuration.")
            return
        email = prompt.ask("Jira email", default=current["email"] or None)
        token = prompt.ask("Jira API token", default=current["token"] or None, hide_input=True)

    url = url or current["url"]
    email = email or current["email"]
    token = token or current["token"]
    if not (url and email and token):
        raise ConfigurationMissing("Jira needs a URL, an email and an API token")

    try:
        JiraClient(url, email, token).get_current_user()
    except RemoteUnavailable as e:
        message.warning(f"Jira connection failed: {e}")
        if not prompt.confirm("Save Jira settings anyway?", default=False):
            return
    else:
        message.success("Jira connection successful")

    CONFIGURATION_REPO.update_config(jira_url=url, jira_email=email, jira_token=token)


def configure(
    reset: Annotated[
        bool, typer.Option("--reset", "-r", help="Reset all configuration")
    ] = False,
    show: Annotated[
        bool, typer.Option("--show", help="Show the configuration and exit")
    ] = False,
    clockify_only: Annotated[
        bool, typer.Option("--clockify-only", help="Only configure Clockify")
    ] = False,
    jira_only: Annotated[
        bool, typer.Option("--jira-only", help="Only configure Jira")
    ] = False,
    api_key: Annotated[
        Optional[str],
        typer.Option("--api-key", envvar="CLOCKIFY_API_KEY", help="Clockify API key"),
    ] = None,
    workspace_id: Annotated[
        Optional[str],
        typer.Option(
            "--workspace", envvar="CLOCKIFY_WORKSPACE_ID", help="Clockify workspace id"
        ),
    ] = None,
    jira_url: Annotated[
        Optional[str], typer.Option("--jira-url", envvar="JIRA_URL", help="Jira base URL")
    ] = None,
    jira_email: Annotated[
        Optional[str], typer.Option("--jira-email", envvar="JIRA_EMAIL", help="Jira email")
    ] = None,
    jira_token: Annotated[
        Optional[str],
        typer.Option("--jira-token", envvar="JIRA_TOKEN", help="Jira API token"),
    ] = None,
    timezone: Annotated[
        Optional[str],
        typer.Option(
            "--timezone", callback=validate_timezone, help="IANA timezone, e.g. America/Santiago"
        ),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", callback=validate_log_level, help="DEBUG, INFO, WARNING or ERROR"),
    ] = None,
    default_duration: Annotated[
        Optional[str],
        typer.Option(
            "--default-duration", callback=validate_duration, help="Default duration, e.g. 1h"
        ),
    ] = None,
    round_to_minutes: Annotated[
        Optional[int],
        typer.Option("--round-to-minutes", min=0, max=60, help="Rounding step for times"),
    ] = None,
    auto_detect_branch: Annotated[
        Optional[bool],
        typer.Option(
            "--auto-detect-branch/--no-auto-detect-branch",
            help="Take the ticket from the git branch when none is given",
        ),
    ] = None,
    default_description: Annotated[
        Optional[str],
        typer.Option("--default-description", help="Description used when none is given"),
    ] = None,
) -> None:
    """Set up Clockify and Jira credentials and general settings."""
    header("configuration")

    if show:
        configuration_view(CONFIGURATION_REPO.get_config(), CONFIGURATION_REPO.path, True)
        mappings_view(CONFIGURATION_REPO.get_project_mappings())
        return

    if reset:
        if prompt.confirm("Are you sure you want to reset all configuration?", default=False):
            CONFIGURATION_REPO.reset_config()
            message.success("Configuration reset")
        else:
            message.info("Configuration reset cancelled.")
        return

    settings_given = any(
        value is not None
        for value in (
            timezone,
            log_level,
            default_duration,
            round_to_minutes,
            auto_detect_branch,
            default_description,
        )
    )
    if settings_given:
        CONFIGURATION_REPO.update_config(
            timezone=timezone,
            log_level=log_level,
            default_duration=default_duration,
            round_to_minutes=round_to_minutes,
            auto_detect_branch=auto_detect_branch,
            default_description=default_description,
        )
        if timezone is not None:
            app_state.set_timezone(timezone)
        message.success("Settings updated")

    credentials_given = any(
        value is not None
        for value in (api_key, workspace_id, jira_url, jira_email, jira_token)
    )
    if settings_given and not credentials_given and not (clockify_only or jira_only):
        return

    if (
        CONFIGURATION_REPO.is_configured()
        and not credentials_given
        and not (clockify_only or jira_only)
    ):
        configuration_view(CONFIGURATION_REPO.get_config(), CONFIGURATION_REPO.path)
        if not prompt.confirm("Update configuration?", default=False):
            message.info("Configuration unchanged.")
            return

    if not jira_only and (
        api_key is not None or workspace_id is not None or not credentials_given
    ):
        __configure_clockify(api_key, workspace_id)

    if not clockify_only and (
        jira_url is not None
        or jira_email is not None
        or jira_token is not None
        or not credentials_given
    ):
        __configure_jira(jira_url, jira_email, jira_token)

    logger.debug("Configuration will be written to %s", CONFIGURATION_REPO.path)
    message.success("Configuration saved")
