"""Configuration module for limit-alarm.

This module provides the alarm configuration value and the locations of
the files the alarm keeps on disk.
"""

import os
from dataclasses import dataclass
from pathlib import Path

CONFIG_DIR_ENV = "CLAUDE_ALARM_DIR"
CONFIG_FILE_NAME = "config.yaml"
PID_FILE_NAME = "alarm.pid"
LOG_FILE_NAME = "alarm.log"


@dataclass(frozen=True)
class AlarmConfig:
    """Alarm configuration.

    Built once per process by merging the config file over these defaults.
    """

    display_message: str = "Time to build. Claude credits are back!"
    spoken_message: str = "Time to build. Clawed credits are back!"
    voice: str | None = "Samantha"
    rate: int = 165
    default_wait_minutes: float = 240
    scan_transcript: bool = False
    transcript_tail_lines: int = 20
    recheck_interval_seconds: float = 30.0
    log_level: str = "INFO"


def get_config_dir() -> Path:
    """Get the directory holding config, PID and log files.

    ``$CLAUDE_ALARM_DIR`` takes precedence over ``~/.claude-alarm``.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".claude-alarm"


def get_config_path() -> Path:
    """Get the path of the YAML config file."""
    return get_config_dir() / CONFIG_FILE_NAME


def get_pid_path() -> Path:
    """Get the path of the liveness record."""
    return get_config_dir() / PID_FILE_NAME


def get_log_path() -> Path:
    """Get the path of the background process log."""
    return get_config_dir() / LOG_FILE_NAME


# Public API
__all__ = [
    "AlarmConfig",
    "CONFIG_DIR_ENV",
    "get_config_dir",
    "get_config_path",
    "get_log_path",
    "get_pid_path",
]
