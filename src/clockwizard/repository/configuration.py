# SPDX-License-Identifier: MIT

import logging
from copy import deepcopy
from pathlib import Path
from typing import Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from clockwizard import configuration, time
from clockwizard.errors import ConfigurationMissing
from clockwizard.model.active_timer import ActiveTimerRecord

logger = logging.getLogger(__name__)


class ConfigurationRepository:
    """
    YAML-backed key-value store for credentials, timezone, project mappings
    and the active timer. Changes are kept in memory and written by flush().
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path
        self._config: Optional[configuration.Configuration] = None
        self.is_dirty = False

    @property
    def path(self) -> Path:
        if self._path is not None:
            return self._path
        return configuration.APP_CONFIG_PATH

    @property
    def config(self) -> configuration.Configuration:
        if self._config is None:
            self.__load_data()
        if self._config is None:
            raise ValueError()
        return self._config

    def __load_data(self) -> None:
        defaults = configuration.get_default_configuration()
        if not self.path.is_file():
            self._config = defaults
            return

        loaded = load(self.path.read_text(), Loader=Loader) or {}

        # Migration: fill in sections and keys missing from older files
        for key, value in defaults.items():
            if key not in loaded or loaded[key] is None:
                loaded[key] = value
            elif isinstance(value, dict) and key != "project_mappings":
                for sub_key, sub_value in value.items():
                    loaded[key].setdefault(sub_key, sub_value)

        self._config = loaded

    def __save_data(self, config: configuration.Configuration) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(dump(dict(config), Dumper=Dumper))
        self.path.chmod(0o600)

    def flush(self) -> bool:
        if self._config is not None and self.is_dirty:
            self.__save_data(self._config)
            self.is_dirty = False
            return True
        return False

    def get_config(self) -> configuration.Configuration:
        return deepcopy(self.config)

    def is_configured(self) -> bool:
        clockify = self.config["clockify"]
        return bool(clockify["api_key"]) and bool(clockify["workspace_id"])

    def has_jira_config(self) -> bool:
        jira = self.config["jira"]
        return bool(jira["url"]) and bool(jira["email"]) and bool(jira["token"])

    def require_clockify(self) -> configuration.ClockifyConfiguration:
        if not self.is_configured():
            raise ConfigurationMissing(
                "Clockify is not configured. Run: clockwizard configure"
            )
        return deepcopy(self.config["clockify"])

    def get_timezone(self) -> str:
        return self.config["timezone"] or configuration.DEFAULT_TIMEZONE

    def update_config(
        self,
        timezone: Optional[str] = None,
        log_level: Optional[str] = None,
        clockify_api_key: Optional[str] = None,
        clockify_workspace_id: Optional[str] = None,
        clockify_user_id: Optional[str] = None,
        jira_url: Optional[str] = None,
        jira_email: Optional[str] = None,
        jira_token: Optional[str] = None,
        default_duration: Optional[str] = None,
        round_to_minutes: Optional[int] = None,
        auto_detect_branch: Optional[bool] = None,
        default_description: Optional[str] = None,
    ) -> None:
        self.is_dirty = True

        if timezone is not None:
            self.config["timezone"] = timezone
        if log_level is not None:
            self.config["log_level"] = log_level.upper()
        if clockify_api_key is not None:
            self.config["clockify"]["api_key"] = clockify_api_key.strip()
        if clockify_workspace_id is not None:
            self.config["clockify"]["workspace_id"] = clockify_workspace_id
        if clockify_user_id is not None:
            self.config["clockify"]["user_id"] = clockify_user_id
        if jira_url is not None:
            self.config["jira"]["url"] = jira_url.rstrip("/")
        if jira_email is not None:
            self.config["jira"]["email"] = jira_email
        if jira_token is not None:
            self.config["jira"]["token"] = jira_token
        if default_duration is not None:
            self.config["timer"]["default_duration"] = default_duration
        if round_to_minutes is not None:
            self.config["timer"]["round_to_minutes"] = round_to_minutes
        if auto_detect_branch is not None:
            self.config["timer"]["auto_detect_branch"] = auto_detect_branch
        if default_description is not None:
            self.config["timer"]["default_description"] = default_description

    def reset_config(self) -> None:
        self.is_dirty = True
        self._config = configuration.get_default_configuration()

    def get_project_mappings(self) -> dict[str, str]:
        return dict(self.config["project_mappings"])

    def get_project_mapping(self, project_key: str) -> Optional[str]:
        return self.config["project_mappings"].get(project_key)

    def add_project_mapping(self, project_key: str, project_id: str) -> None:
        self.is_dirty = True
        self.config["project_mappings"][project_key] = project_id
        logger.debug("Saved project mapping %s -> %s", project_key, project_id)

    def get_active_timer(self) -> Optional[ActiveTimerRecord]:
        stored = self.config.get("active_timer")
        if not stored:
            return None
        return {
            "id": stored["id"],
            "project_name": stored.get("project_name"),
            "task_name": stored.get("task_name"),
            "project_id": stored.get("project_id"),
            "task_id": stored.get("task_id"),
            "start": time.datetime_from_str(stored["start"]),
            "description": stored.get("description"),
        }

    def save_active_timer(self, record: ActiveTimerRecord) -> None:
        self.is_dirty = True
        self.config["active_timer"] = {
            "id": record["id"],
            "project_name": record["project_name"],
            "task_name": record["task_name"],
            "project_id": record["project_id"],
            "task_id": record["task_id"],
            "start": time.datetime_to_iso_str(record["start"]),
            "description": record["description"],
        }

    def clear_active_timer(self) -> None:
        if self.config.get("active_timer") is None:
            return
        self.is_dirty = True
        self.config["active_timer"] = None


CONFIGURATION_REPO = ConfigurationRepository()
