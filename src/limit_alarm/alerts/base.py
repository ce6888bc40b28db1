"""Alert renderer protocol and shared helpers.

Defines the interface the scheduler uses to make noise.
"""

import logging
import subprocess
import sys
from typing import Protocol

logger = logging.getLogger(__name__)

ALERT_TITLE = "Claude Credits Renewed"
ALERT_SUBTITLE = "Your usage limit has reset"
COMMAND_TIMEOUT_SECONDS = 30


class DismissSignal:
    """Completion signal for a dismissible alert.

    Wraps the dialog process when there is one. The alert counts as dismissed
    once the dialog exits cleanly or ``set()`` is called.
    """

    def __init__(self, process: subprocess.Popen | None = None) -> None:
        self._process = process
        self._dismissed = False

    @property
    def dismissed(self) -> bool:
        """Whether the user has dismissed the alert."""
        if self._dismissed:
            return True
        if self._process is not None and self._process.poll() == 0:
            self._dismissed = True
        return self._dismissed

    def set(self) -> None:
        """Mark the alert as dismissed."""
        self._dismissed = True

    def close(self) -> None:
        """Close the dialog if it is still open."""
        if self._process is not None and self._process.poll() is None:
            try:
                self._process.terminate()
            except OSError:
                pass


class AlertRenderer(Protocol):
    """Interface for rendering alarm alerts.

    Implementations never raise: each mechanism is tried on its own and a
    failure is logged and skipped.
    """

    def render_alert(self, message: str, spoken_message: str) -> None:
        """Play sound, speak and show a notification.

        Args:
            message: Text for the notification.
            spoken_message: Text for speech synthesis.
        """
        ...

    def render_dismissible_alert(self, message: str) -> DismissSignal | None:
        """Show a modal the user can dismiss, without blocking.

        Args:
            message: Text for the dialog.

        Returns:
            Signal that completes on dismissal, or None if unsupported.
        """
        ...


def run_quietly(cmd: list[str], timeout: float = COMMAND_TIMEOUT_SECONDS) -> bool:
    """Run an alert command, swallowing any failure.

    Args:
        cmd: Command and arguments.
        timeout: Seconds before the command is killed.

    Returns:
        True if the command ran and exited 0.
    """
    try:
        subprocess.run(cmd, check=True, capture_output=True, timeout=timeout)
        return True
    except FileNotFoundError:
        logger.debug(f"Alert command not found: {cmd[0]}")
    except subprocess.TimeoutExpired:
        logger.warning(f"Alert command timed out: {cmd[0]}")
    except subprocess.CalledProcessError as e:
        logger.debug(f"Alert command {cmd[0]} failed with code {e.returncode}")
    except OSError as e:
        logger.debug(f"Alert command {cmd[0]} failed: {e}")
    return False


def spawn_quietly(cmd: list[str]) -> subprocess.Popen | None:
    """Start an alert command without waiting for it.

    Returns:
        The running process, or None if it could not be started.
    """
    try:
        return subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        logger.debug(f"Could not start {cmd[0]}: {e}")
        return None


def ring_bell() -> None:
    """Write a terminal bell, if there is a terminal to write to."""
    try:
        if sys.stdout is not None:
            sys.stdout.write("\a")
            sys.stdout.flush()
    except (OSError, ValueError):
        pass


__all__ = [
    "ALERT_SUBTITLE",
    "ALERT_TITLE",
    "AlertRenderer",
    "DismissSignal",
    "ring_bell",
    "run_quietly",
    "spawn_quietly",
]
