"""Platform detection for alert renderer selection.

Detects the current platform and which alert tools it has installed.
"""

import platform as platform_module
import shutil
from enum import Enum, auto


class Platform(Enum):
    """Detected platform for alert renderer selection."""

    MACOS = auto()
    LINUX = auto()
    WINDOWS = auto()
    OTHER = auto()


def detect_platform() -> Platform:
    """Detect the current platform for alert renderer selection.

    Returns:
        Platform enum indicating the detected platform:
        - MACOS for Darwin systems (any architecture)
        - LINUX for Linux (including Raspberry Pi)
        - WINDOWS for Windows
        - OTHER for all other platforms

    This function never raises exceptions.
    """
    system = platform_module.system()

    if system == "Darwin":
        return Platform.MACOS
    elif system == "Linux":
        return Platform.LINUX
    elif system == "Windows":
        return Platform.WINDOWS
    else:
        return Platform.OTHER


def command_exists(command: str) -> bool:
    """Check whether an executable is on PATH."""
    return shutil.which(command) is not None


def default_voice(platform: Platform) -> str | None:
    """Pick the speech engine or voice to record in a fresh config.

    Args:
        platform: Target platform.

    Returns:
        Voice name on macOS, engine name on Linux/Windows, or None if the
        platform has no speech tool.
    """
    if platform == Platform.MACOS:
        return "Samantha"
    if platform == Platform.LINUX:
        if command_exists("espeak"):
            return "espeak"
        if command_exists("spd-say"):
            return "spd-say"
        return None
    if platform == Platform.WINDOWS:
        return "powershell"
    return None


def describe_capabilities(platform: Platform, voice: str | None) -> list[str]:
    """Describe the alert mechanisms available, one line each, for setup output."""
    if platform == Platform.MACOS:
        return [
            f"Voice: {voice or 'none'} ✓",
            "Desktop notifications: osascript ✓",
            "Sound: afplay ✓",
        ]
    if platform == Platform.LINUX:
        has_notify = command_exists("notify-send")
        return [
            "Desktop notifications: "
            + ("notify-send ✓" if has_notify else "✗ (install: sudo apt install libnotify-bin)"),
            "Voice: " + (f"{voice} ✓" if voice else "✗ (install: sudo apt install espeak)"),
            "Dialog: " + ("zenity ✓" if command_exists("zenity") else "✗ (optional: zenity)"),
        ]
    if platform == Platform.WINDOWS:
        return [
            "Voice: PowerShell Speech ✓",
            "Dialog: PowerShell MessageBox ✓",
        ]
    return ["Alerts: terminal bell only"]


__all__ = [
    "Platform",
    "command_exists",
    "default_voice",
    "describe_capabilities",
    "detect_platform",
]
