"""Liveness record for the alarm process.

A PID file marks the one alarm process that is waiting or alerting. A record
whose process has died is stale and gets removed the next time anyone checks.
"""

import logging
import os
import signal
from pathlib import Path

from .config import get_pid_path

logger = logging.getLogger(__name__)


def process_alive(pid: int) -> bool:
    """Probe a process with signal 0.

    Args:
        pid: Process ID to check.

    Returns:
        True if the process exists (even if owned by another user).
    """
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    except OSError:
        return False
    return True


class LivenessStore:
    """PID-file based record of the active alarm.

    Not a lock: two processes that both see no record will both claim, and
    the second claim simply overwrites the first.
    """

    def __init__(self, path: Path | str | None = None) -> None:
        """Initialize the store.

        Args:
            path: PID file location. Defaults to the standard location.
        """
        self._path = Path(path) if path is not None else get_pid_path()

    @property
    def path(self) -> Path:
        """Location of the PID file."""
        return self._path

    def exists(self) -> bool:
        """Check whether a record is present, without probing it."""
        return self._path.exists()

    def read_pid(self) -> int | None:
        """Read the recorded PID.

        Returns:
            The PID, or None if the record is missing or not a number.
        """
        try:
            return int(self._path.read_text().strip())
        except (OSError, ValueError):
            return None

    def is_active(self) -> bool:
        """Check whether a live alarm process holds the record.

        A record pointing at a dead process (or holding garbage) is deleted.
        """
        if not self._path.exists():
            return False

        pid = self.read_pid()
        if pid is not None and process_alive(pid):
            return True

        logger.info(f"Removing stale liveness record (PID: {pid})")
        self.release()
        return False

    def claim(self, pid: int | None = None) -> None:
        """Record a process as the active alarm.

        Args:
            pid: Process to record. Defaults to the current process.
        """
        pid = os.getpid() if pid is None else pid
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(str(pid))
        logger.debug(f"Claimed liveness record {self._path} for PID {pid}")

    def release(self, owner: int | None = None) -> None:
        """Remove the record. Safe to call when it is already gone.

        Args:
            owner: Only remove the record if it names this PID. A record
                   holding another process's PID is left alone.
        """
        if owner is not None:
            pid = self.read_pid()
            if pid is not None and pid != owner:
                logger.debug(f"Liveness record belongs to PID {pid}, leaving it")
                return

        try:
            self._path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove liveness record {self._path}: {e}")

    def terminate(self) -> bool:
        """Stop the recorded alarm process and clear the record.

        Returns:
            True if a live process was signalled.
        """
        pid = self.read_pid()
        signalled = False

        if pid is not None and process_alive(pid):
            try:
                os.kill(pid, signal.SIGTERM)
                signalled = True
            except OSError as e:
                logger.warning(f"Failed to signal alarm process {pid}: {e}")

        self.release()
        return signalled


__all__ = ["LivenessStore", "process_alive"]
