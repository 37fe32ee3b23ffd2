# SPDX-License-Identifier: MIT

import logging
from typing import TYPE_CHECKING, Callable, Optional

import pendulum

from clockwizard.errors import ConflictError, NotFound, RemoteUnavailable
from clockwizard.model.active_timer import ActiveTimerRecord, ActiveTimerStore
from clockwizard.model.project import Project, Task
from clockwizard.model.time_entry import NewTimeEntry, TimeEntry
from clockwizard.model.timer import TimerState, TimerStatus, is_timer_running
from clockwizard.time import now_utc

if TYPE_CHECKING:
    from clockwizard.client.clockify import ClockifyClient
    from clockwizard.repository.catalog import CatalogRepository

logger = logging.getLogger(__name__)

RECENT_ENTRIES_TO_SCAN = 20

LookupResult = tuple[Optional[TimeEntry], bool]
LookupStrategy = Callable[[], LookupResult]
Confirm = Callable[[str, bool], bool]


def record_from_entry(entry: TimeEntry) -> ActiveTimerRecord:
    return {
        "id": entry["id"],
        "project_name": entry["project_name"],
        "task_name": entry["task_name"],
        "project_id": entry["project_id"],
        "task_id": entry["task_id"],
        "start": entry["start"],
        "description": entry["description"],
    }


def entry_from_record(record: ActiveTimerRecord) -> TimeEntry:
    return {
        "id": record["id"],
        "start": record["start"],
        "end": None,
        "project_id": record["project_id"],
        "project_name": record["project_name"],
        "task_id": record["task_id"],
        "task_name": record["task_name"],
        "description": record["description"] or "",
        "tags": [],
        "billable": False,
    }


def _status(
    state: TimerState,
    entry: Optional[TimeEntry],
    remote_ok: bool,
    warning: Optional[str] = None,
) -> TimerStatus:
    return {"state": state, "entry": entry, "remote_ok": remote_ok, "warning": warning}


class TimerService:
    """
    Keeps the locally cached active timer in line with Clockify.

    Clockify is authoritative whenever it answers. The local record is only
    trusted when every lookup failed and the operator agrees to use it.
    """

    def __init__(
        self,
        client: "ClockifyClient",
        store: ActiveTimerStore,
        user_id: str,
        confirm: Confirm,
        catalog: Optional["CatalogRepository"] = None,
    ) -> None:
        self._client = client
        self._store = store
        self._user_id = user_id
        self._confirm = confirm
        self._catalog = catalog

    def lookup_strategies(self) -> list[tuple[str, LookupStrategy]]:
        return [
            ("current entry endpoint", self.__lookup_current_entry),
            ("recent entries scan", self.__lookup_recent_entries),
        ]

    def __lookup_current_entry(self) -> LookupResult:
        try:
            return self._client.get_current_open_entry(self._user_id), True
        except RemoteUnavailable as e:
            logger.warning("Current entry lookup failed: %s", e)
            return None, False

    def __lookup_recent_entries(self) -> LookupResult:
        try:
            entries = self._client.list_recent_entries(
                self._user_id, page=1, page_size=RECENT_ENTRIES_TO_SCAN
            )
        except RemoteUnavailable as e:
            logger.warning("Recent entries scan failed: %s", e)
            return None, False
        for entry in entries:
            if entry["end"] is None:
                return entry, True
        return None, True

    def __hydrate(self, entry: TimeEntry) -> TimeEntry:
        if self._catalog is None:
            return entry
        try:
            return self._catalog.hydrate([entry])[0]
        except RemoteUnavailable as e:
            logger.warning("Could not resolve project and task names: %s", e)
            return entry

    def query(self) -> TimerStatus:
        local_record = self._store.get_active_timer()

        remote_entry: Optional[TimeEntry] = None
        remote_ok = False
        for name, strategy in self.lookup_strategies():
            entry, ok = strategy()
            remote_ok = remote_ok or ok
            if entry is not None:
                logger.debug("Open entry %s found via %s", entry["id"], name)
                remote_entry = entry
                break

        if remote_entry is not None:
            remote_entry = self.__hydrate(remote_entry)
            if local_record is None or local_record["id"] != remote_entry["id"]:
                logger.info("Local timer updated to match remote entry %s", remote_entry["id"])
                self._store.save_active_timer(record_from_entry(remote_entry))
                return _status(TimerState.RECONCILED, remote_entry, True)
            return _status(TimerState.RUNNING_REMOTE, remote_entry, True)

        if remote_ok:
            if local_record is not None:
                logger.info("Clearing stale local timer %s", local_record["id"])
                self._store.clear_active_timer()
                return _status(
                    TimerState.RECONCILED, None, True, "Cleared stale local timer data."
                )
            return _status(TimerState.NO_TIMER, None, True)

        if local_record is None:
            return _status(
                TimerState.NO_TIMER,
                None,
                False,
                "Could not reach Clockify and no local timer data is available.",
            )

        if not self._confirm("Could not reach Clockify. Use local timer data?", True):
            raise RemoteUnavailable("Could not determine the current timer: Clockify is unreachable")
        return _status(
            TimerState.RUNNING_LOCAL_ONLY,
            entry_from_record(local_record),
            False,
            "Clockify is unreachable, showing local timer data.",
        )

    def start(
        self,
        project: Project,
        task: Optional[Task] = None,
        description: Optional[str] = None,
    ) -> TimeEntry:
        status = self.query()
        if is_timer_running(status):
            raise ConflictError("A timer is already running", entry=status["entry"])

        new_entry: NewTimeEntry = {
            "start": now_utc(),
            "end": None,
            "project_id": project["id"],
            "task_id": task["id"] if task is not None else None,
            "description": description,
        }
        entry = self._client.create_time_entry(new_entry)
        if not entry["id"] or entry["start"] is None:
            raise RemoteUnavailable("Clockify returned an incomplete time entry")

        entry["project_name"] = project["name"]
        entry["task_name"] = task["name"] if task is not None else None
        self._store.save_active_timer(record_from_entry(entry))
        logger.info("Started timer %s on project %s", entry["id"], project["name"])
        return entry

    def stop(
        self,
        at: Optional[pendulum.DateTime] = None,
        status: Optional[TimerStatus] = None,
    ) -> TimeEntry:
        """
        Stop the running timer at the given instant (now by default).

        The stop instant is not compared with the entry start; durations are
        always computed as absolute values.
        """
        if status is None:
            status = self.query()
        if status["entry"] is None:
            raise NotFound("No active timer found")

        end = at if at is not None else now_utc()
        stopped = self._client.patch_stop_open_entry(self._user_id, end)
        self._store.clear_active_timer()
        logger.info("Stopped timer %s", stopped["id"])
        return self.__hydrate(stopped)
