# SPDX-License-Identifier: MIT

from typing import NotRequired, Optional, TypedDict

import platformdirs

APP_NAME = "clockwizard"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH = CONFIG_PATH / "config.yaml"

DEFAULT_TIMEZONE = "America/Santiago"
DEFAULT_LOG_LEVEL = "WARNING"


class ClockifyConfiguration(TypedDict):
    api_key: str
    workspace_id: str
    user_id: str


class JiraConfiguration(TypedDict):
    url: str
    email: str
    token: str


class TimerConfiguration(TypedDict):
    default_duration: str
    round_to_minutes: int
    auto_detect_branch: bool
    default_description: str


class StoredActiveTimer(TypedDict):
    """Active timer as written to the config file (start is an ISO string)."""

    id: str
    project_name: Optional[str]
    task_name: Optional[str]
    project_id: Optional[str]
    task_id: Optional[str]
    start: str
    description: Optional[str]


class Configuration(TypedDict):
    timezone: str
    log_level: str
    clockify: ClockifyConfiguration
    jira: JiraConfiguration
    project_mappings: dict[str, str]
    timer: TimerConfiguration
    active_timer: NotRequired[Optional[StoredActiveTimer]]


def get_default_configuration() -> Configuration:
    return {
        "timezone": DEFAULT_TIMEZONE,
        "log_level": DEFAULT_LOG_LEVEL,
        "clockify": {
            "api_key": "",
            "workspace_id": "",
            "user_id": "",
        },
        "jira": {
            "url": "",
            "email": "",
            "token": "",
        },
        "project_mappings": {},
        "timer": {
            "default_duration": "1h",
            "round_to_minutes": 15,
            "auto_detect_branch": True,
            "default_description": "Development work",
        },
        "active_timer": None,
    }
