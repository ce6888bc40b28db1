"""Hook installation into the assistant's settings.json.

Adds (or removes) one command hook per watched event. Entries are recognised
by the package name in their command, so installing twice is a no-op.
"""

import json
import logging
import os
import shutil
import sys
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

HOOK_EVENTS = ("Notification", "Stop", "PostToolUseFailure")
HOOK_MARKER = "limit_alarm"
HOOK_TIMEOUT_SECONDS = 10


def get_settings_path() -> Path:
    """Get the assistant settings file, honouring CLAUDE_CONFIG_DIR."""
    config_dir = os.environ.get("CLAUDE_CONFIG_DIR")
    if config_dir:
        return Path(config_dir).expanduser() / "settings.json"
    return Path.home() / ".claude" / "settings.json"


def hook_command() -> str:
    """Command line the assistant runs for each hook event."""
    return f'"{sys.executable}" -m {HOOK_MARKER} hook'


def _is_ours(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False
    return any(
        isinstance(hook, dict) and HOOK_MARKER in str(hook.get("command", ""))
        for hook in entry.get("hooks", []) or []
    )


def _read_settings(path: Path) -> dict[str, Any]:
    """Read settings, backing up and discarding a file that does not parse."""
    if not path.exists():
        return {}

    try:
        with open(path) as f:
            settings = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        backup = path.with_name(path.name + ".backup")
        logger.warning(f"Could not parse {path} ({e}), backing up to {backup}")
        shutil.copyfile(path, backup)
        return {}

    return settings if isinstance(settings, dict) else {}


def _write_settings(path: Path, settings: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(settings, f, indent=2)
        f.write("\n")


def install_hooks(
    settings_path: Path | None = None,
    command: str | None = None,
) -> dict[str, bool]:
    """Install the alarm hook for each watched event.

    Args:
        settings_path: Settings file. Defaults to get_settings_path().
        command: Hook command. Defaults to hook_command().

    Returns:
        Mapping of event name to True if added, False if already present.
    """
    path = settings_path or get_settings_path()
    settings = _read_settings(path)
    hooks = settings.setdefault("hooks", {})

    entry = {
        "hooks": [
            {
                "type": "command",
                "command": command or hook_command(),
                "timeout": HOOK_TIMEOUT_SECONDS,
            }
        ]
    }

    results: dict[str, bool] = {}
    for event in HOOK_EVENTS:
        entries = hooks.setdefault(event, [])
        if any(_is_ours(existing) for existing in entries):
            results[event] = False
        else:
            entries.append(entry)
            results[event] = True

    _write_settings(path, settings)
    return results


def remove_hooks(settings_path: Path | None = None) -> bool:
    """Remove the alarm hooks, dropping event lists that end up empty.

    Returns:
        True if the settings file was updated.
    """
    path = settings_path or get_settings_path()
    if not path.exists():
        return False

    try:
        with open(path) as f:
            settings = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not update {path}: {e}")
        return False

    hooks = settings.get("hooks") if isinstance(settings, dict) else None
    if not isinstance(hooks, dict):
        return False

    for event in HOOK_EVENTS:
        if event not in hooks:
            continue
        hooks[event] = [entry for entry in hooks[event] if not _is_ours(entry)]
        if not hooks[event]:
            del hooks[event]

    if not hooks:
        del settings["hooks"]

    _write_settings(path, settings)
    return True


__all__ = [
    "HOOK_EVENTS",
    "get_settings_path",
    "hook_command",
    "install_hooks",
    "remove_hooks",
]
