# SPDX-License-Identifier: MIT

import logging

from rich.console import Console
from rich.logging import RichHandler
from yaml import dump

try:
    from yaml import CDumper as Dumper
except ImportError:
    from yaml import Dumper  # type: ignore[assignment]

from clockwizard import configuration, time
from clockwizard import state as app_state
from clockwizard.repository.configuration import CONFIGURATION_REPO

logger = logging.getLogger(__name__)


def initialize() -> None:
    configuration.CONFIG_PATH.mkdir(parents=True, exist_ok=True)
    __ensure_config_file()

    setup_logging(CONFIGURATION_REPO.get_config()["log_level"])

    timezone = CONFIGURATION_REPO.get_timezone()
    if not time.is_valid_timezone(timezone):
        logger.warning(
            "Invalid timezone '%s' in configuration, using %s",
            timezone,
            configuration.DEFAULT_TIMEZONE,
        )
        timezone = configuration.DEFAULT_TIMEZONE
    app_state.set_timezone(timezone)


def setup_logging(log_level: str) -> None:
    level = getattr(logging, log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    logging.getLogger().setLevel(level)

    # Keep HTTP connection chatter out of debug output
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def __ensure_config_file() -> None:
    if not configuration.APP_CONFIG_PATH.is_file():
        configuration.APP_CONFIG_PATH.touch(mode=0o600)
        config = configuration.get_default_configuration()
        configuration.APP_CONFIG_PATH.write_text(dump(dict(config), Dumper=Dumper))
