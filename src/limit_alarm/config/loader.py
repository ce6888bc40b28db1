"""YAML configuration loader with fallback defaults.

Supports:
- Loading the YAML config file (JSON content parses too)
- Per-key fallback to defaults for missing or unparsable values
- camelCase aliases for keys written by older JSON configs
"""

import dataclasses
import logging
import math
from pathlib import Path
from typing import Any

import yaml

from . import AlarmConfig, get_config_path

logger = logging.getLogger(__name__)

KEY_ALIASES = {
    "displayMessage": "display_message",
    "spokenMessage": "spoken_message",
    "defaultWaitMinutes": "default_wait_minutes",
    "scanTranscript": "scan_transcript",
    "transcriptTailLines": "transcript_tail_lines",
    "recheckIntervalSeconds": "recheck_interval_seconds",
    "logLevel": "log_level",
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Values from override take precedence. Nested dicts are merged recursively.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML mapping from file.

    A missing, unreadable or malformed file yields an empty mapping.
    """
    if not path.exists():
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config {path}: top level is not a mapping")
        return {}
    return data


def _as_text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _as_number(value: Any) -> float | None:
    # bool is an int subclass; "true" is not a rate
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _coerce(name: str, value: Any, default: Any) -> Any:
    """Coerce a raw config value, returning ``default`` when unparsable."""
    if name in ("display_message", "spoken_message"):
        text = _as_text(value)
        return default if text is None else text

    if name == "voice":
        if value is None:
            return None
        text = _as_text(value)
        return default if text is None else text

    if name == "scan_transcript":
        return value if isinstance(value, bool) else default

    if name == "log_level":
        text = _as_text(value)
        if text and text.upper() in LOG_LEVELS:
            return text.upper()
        return default

    number = _as_number(value)
    if name == "default_wait_minutes":
        return number if number is not None and number >= 0 else default
    if name in ("rate", "transcript_tail_lines"):
        return int(number) if number is not None and number >= 1 else default
    if name == "recheck_interval_seconds":
        return number if number is not None and number > 0 else default
    return default


def dict_to_config(data: dict[str, Any]) -> AlarmConfig:
    """Convert a raw mapping to an immutable AlarmConfig.

    Unknown keys are ignored. Every field falls back to its default when the
    key is missing or its value cannot be used.
    """
    normalized: dict[str, Any] = {}
    for key, value in data.items():
        normalized[KEY_ALIASES.get(key, key)] = value

    defaults = AlarmConfig()
    values: dict[str, Any] = {}
    for field in dataclasses.fields(AlarmConfig):
        default = getattr(defaults, field.name)
        if field.name in normalized:
            values[field.name] = _coerce(field.name, normalized[field.name], default)

    return dataclasses.replace(defaults, **values)


def config_to_dict(config: AlarmConfig) -> dict[str, Any]:
    """Convert an AlarmConfig to a plain mapping for YAML output."""
    return dataclasses.asdict(config)


def load_config(path: str | Path | None = None) -> AlarmConfig:
    """Load alarm configuration.

    Args:
        path: Path to the config file. Defaults to the standard location.

    Returns:
        Parsed AlarmConfig (all defaults if the file is absent)

    Examples:
        >>> config = load_config()
        >>> config = load_config(path="/tmp/alarm.yaml")
    """
    config_path = Path(path) if path is not None else get_config_path()
    return dict_to_config(load_yaml(config_path))


def save_config(config: AlarmConfig, path: str | Path | None = None) -> Path:
    """Write configuration to disk, keeping keys this version does not know.

    Args:
        config: Configuration to persist
        path: Destination. Defaults to the standard location.

    Returns:
        The path written.
    """
    config_path = Path(path) if path is not None else get_config_path()
    existing = {
        key: value for key, value in load_yaml(config_path).items() if key not in KEY_ALIASES
    }
    data = deep_merge(existing, config_to_dict(config))

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    return config_path


__all__ = [
    "config_to_dict",
    "deep_merge",
    "dict_to_config",
    "load_config",
    "load_yaml",
    "save_config",
]
