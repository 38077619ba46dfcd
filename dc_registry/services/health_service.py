import threading

import structlog

from dc_registry.models.health_status import DbHealth, Status

logger = structlog.get_logger()


def _to_status(value: Status | str) -> Status | None:
    if isinstance(value, Status):
        return value
    for status in Status:
        if value in (status.value, status.name):
            return status
    return None


class HealthState:
    """
    Holds the database health as last observed by the connectivity monitor.

    Written by the monitor task and read by the /health endpoint, possibly from different threads, so both status
    and its text mirror are read and written together under a lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._health = DbHealth()

    def set(self, status: Status | str) -> None:
        """
        Records a new status. Values that are not a recognised Status are ignored.

        :param status: a Status, or a Status value or name
        """
        new_status = _to_status(status)
        if new_status is None:
            logger.warning(f"Ignoring unrecognised health status {status!r}")
            return
        with self._lock:
            if self._health.status != new_status:
                logger.info(f"Database health changed from {self._health.statusText} to {new_status.name}")
            self._health = DbHealth(status=new_status, statusText=new_status.name)

    def get(self) -> Status:
        with self._lock:
            return self._health.status

    def snapshot(self) -> DbHealth:
        with self._lock:
            return self._health.model_copy()
