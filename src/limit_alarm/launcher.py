"""Detached launch of the alarm daemon.

The daemon must outlive the hook (and the terminal), so it gets its own
session and no inherited stdio.
"""

import logging
import os
import subprocess
import sys

logger = logging.getLogger(__name__)


def daemon_command(wait_minutes: float) -> list[str]:
    """Build the command line that runs the alarm daemon."""
    return [sys.executable, "-m", "limit_alarm", "daemon", f"{wait_minutes:g}"]


def spawn_daemon(wait_minutes: float) -> int:
    """Start the alarm daemon as a detached background process.

    Args:
        wait_minutes: Minutes until the alarm fires.

    Returns:
        PID of the spawned process.
    """
    kwargs: dict = {
        "stdin": subprocess.DEVNULL,
        "stdout": subprocess.DEVNULL,
        "stderr": subprocess.DEVNULL,
        "close_fds": True,
    }
    if os.name == "nt":
        kwargs["creationflags"] = (
            subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP
        )
    else:
        kwargs["start_new_session"] = True

    process = subprocess.Popen(daemon_command(wait_minutes), **kwargs)
    logger.info(f"Spawned alarm daemon (PID: {process.pid}, wait: {wait_minutes:g} min)")
    return process.pid


__all__ = ["daemon_command", "spawn_daemon"]
