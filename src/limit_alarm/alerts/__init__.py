"""Alert rendering for limit-alarm.

Provides platform-adaptive alerts:
- macOS: Notification Center banner, Glass chime, `say`
- Linux: notify-send, espeak/spd-say, freedesktop chime, zenity dialog
- Windows: PowerShell speech and message box
- Other: Falls back to the mock renderer (log only)
"""

import logging
import os
from typing import TYPE_CHECKING

from .base import AlertRenderer, DismissSignal
from .mock import MockAlertRenderer
from .platform import Platform, detect_platform
from .push import PushNotifier

if TYPE_CHECKING:
    from ..config import AlarmConfig

logger = logging.getLogger(__name__)

MOCK_ALERTS_ENV = "CLAUDE_ALARM_MOCK_ALERTS"


def create_renderer(
    config: "AlarmConfig | None" = None,
    use_mock: bool = False,
) -> AlertRenderer:
    """Create the alert renderer for the current platform.

    Args:
        config: Alarm configuration (optional)
        use_mock: If True, force the mock renderer. The
                  CLAUDE_ALARM_MOCK_ALERTS=1 environment variable does the same.

    Returns:
        AlertRenderer implementation appropriate for the platform.
        Never returns None - always falls back to MockAlertRenderer.
    """
    if use_mock or os.environ.get(MOCK_ALERTS_ENV, "").lower() in ("1", "true", "yes"):
        logger.info("Alerts: Using MockAlertRenderer (requested)")
        return MockAlertRenderer()

    platform = detect_platform()
    logger.debug(f"Alerts: Detected platform: {platform.name}")

    voice = config.voice if config is not None else "Samantha"
    rate = config.rate if config is not None else 165

    if platform == Platform.MACOS:
        from .macos import MacOSAlertRenderer

        return MacOSAlertRenderer(voice=voice, rate=rate)

    elif platform == Platform.LINUX:
        from .linux import LinuxAlertRenderer

        return LinuxAlertRenderer(voice=voice, rate=rate)

    elif platform == Platform.WINDOWS:
        from .windows import WindowsAlertRenderer

        return WindowsAlertRenderer(voice=voice)

    logger.warning("Alerts: Unsupported platform, using MockAlertRenderer (fallback)")
    return MockAlertRenderer()


__all__ = [
    "AlertRenderer",
    "DismissSignal",
    "MockAlertRenderer",
    "Platform",
    "PushNotifier",
    "create_renderer",
    "detect_platform",
]
