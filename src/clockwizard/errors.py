# SPDX-License-Identifier: MIT

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from clockwizard.model.time_entry import TimeEntry


class ClockWizardError(Exception):
    """Base class for errors rendered as a single line by the CLI."""

    pass


class InvalidFormat(ClockWizardError):
    pass


class InvalidRange(ClockWizardError):
    pass


class NotFound(ClockWizardError):
    pass


class ConflictError(ClockWizardError):
    """Raised when a timer is started while another one is running."""

    def __init__(self, message: str, entry: Optional["TimeEntry"] = None) -> None:
        super().__init__(message)
        self.entry = entry


class RemoteUnavailable(ClockWizardError):
    """Network failure, timeout or non-2xx answer from a remote service."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        message = super().__str__()
        if self.status_code is not None:
            message = f"{message} (HTTP {self.status_code})"
        if self.body:
            message = f"{message}: {self.body}"
        return message


class ConfigurationMissing(ClockWizardError):
    pass
