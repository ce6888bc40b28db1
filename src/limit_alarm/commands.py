"""Alarm commands behind the CLI.

Start, stop, status, test, setup and uninstall. These functions do the work
and report results; printing is left to the CLI.
"""

import logging
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .alerts.platform import Platform, default_voice, describe_capabilities, detect_platform
from .config import AlarmConfig, get_config_dir, get_config_path
from .config.loader import load_config, save_config
from .detection import parse_duration
from .errors import AlarmAlreadyActiveError, InvalidDurationError
from .install import install_hooks, remove_hooks
from .launcher import spawn_daemon
from .liveness import LivenessStore
from .scheduler import run_daemon

logger = logging.getLogger(__name__)


@dataclass
class SetupReport:
    """Outcome of setup.

    Attributes:
        platform: Detected platform.
        capabilities: Human-readable alert capability lines.
        config_path: Where the config was written.
        hooks: Event name -> True if newly added, False if already installed.
    """

    platform: Platform
    capabilities: list[str]
    config_path: Path
    hooks: dict[str, bool]


def detect_config(platform: Platform | None = None) -> AlarmConfig:
    """Build a default configuration for the platform's speech tools."""
    platform = platform or detect_platform()
    return AlarmConfig(voice=default_voice(platform))


def ensure_config(platform: Platform | None = None) -> AlarmConfig:
    """Load the config, writing a detected default first if none exists."""
    config_path = get_config_path()
    if not config_path.exists():
        save_config(detect_config(platform), config_path)
        logger.info(f"Wrote default config to {config_path}")
    return load_config(config_path)


def start_alarm(
    expression: str,
    liveness: LivenessStore | None = None,
    spawn: Callable[[float], object] | None = None,
) -> float:
    """Start a manual alarm.

    Args:
        expression: Time expression ("4h", "30m", "90s", "120").
        liveness: Liveness store to check.
        spawn: Launches the daemon with a wait in minutes. Defaults to
               spawn_daemon.

    Returns:
        The wait in minutes.

    Raises:
        InvalidDurationError: If the expression cannot be parsed.
        AlarmAlreadyActiveError: If an alarm is already running.
    """
    minutes = parse_duration(expression)
    if minutes is None:
        raise InvalidDurationError(expression)

    liveness = liveness or LivenessStore()
    if liveness.is_active():
        raise AlarmAlreadyActiveError(liveness.read_pid())

    ensure_config()
    (spawn or spawn_daemon)(minutes)
    return minutes


def stop_alarm(liveness: LivenessStore | None = None) -> bool | None:
    """Dismiss the active alarm.

    Returns:
        None if there was no alarm, True if a running alarm was stopped,
        False if the record was stale.
    """
    liveness = liveness or LivenessStore()
    if not liveness.exists():
        return None
    return liveness.terminate()


def alarm_status(liveness: LivenessStore | None = None) -> int | None:
    """Get the PID of the active alarm, or None."""
    liveness = liveness or LivenessStore()
    if not liveness.is_active():
        return None
    return liveness.read_pid()


def fire_test_alarm() -> int:
    """Fire a test alarm in this process."""
    return run_daemon(0, immediate=True, config=ensure_config())


def run_setup(settings_path: Path | None = None) -> SetupReport:
    """Write the config and install the hooks.

    Args:
        settings_path: Assistant settings file. Defaults to the standard one.

    Returns:
        SetupReport describing what was done.
    """
    platform = detect_platform()
    config = ensure_config(platform)
    hooks = install_hooks(settings_path)

    return SetupReport(
        platform=platform,
        capabilities=describe_capabilities(platform, config.voice),
        config_path=get_config_path(),
        hooks=hooks,
    )


def run_uninstall(settings_path: Path | None = None) -> bool:
    """Stop any alarm, remove the hooks and delete the config directory.

    Returns:
        True if the config directory existed and was removed.
    """
    stop_alarm()
    remove_hooks(settings_path)

    config_dir = get_config_dir()
    if not config_dir.exists():
        return False
    shutil.rmtree(config_dir, ignore_errors=True)
    return True


__all__ = [
    "SetupReport",
    "alarm_status",
    "detect_config",
    "ensure_config",
    "fire_test_alarm",
    "run_setup",
    "run_uninstall",
    "start_alarm",
    "stop_alarm",
]
