"""macOS alert renderer using osascript, afplay and `say`."""

import logging

from .base import ALERT_SUBTITLE, ALERT_TITLE, DismissSignal, ring_bell, run_quietly, spawn_quietly

logger = logging.getLogger(__name__)


def applescript_string(text: str) -> str:
    """Quote text as an AppleScript string literal."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class MacOSAlertRenderer:
    """Alert renderer for macOS.

    Shows a Notification Center banner, plays the Glass chime and speaks the
    message with the configured voice.
    """

    SOUND_FILE = "/System/Library/Sounds/Glass.aiff"

    def __init__(self, voice: str | None = "Samantha", rate: int = 165) -> None:
        """Initialize macOS renderer.

        Args:
            voice: `say` voice name, or None to stay silent
            rate: Speech rate in words per minute
        """
        self._voice = voice
        self._rate = rate

    def render_alert(self, message: str, spoken_message: str) -> None:
        """Show notification, play chime, speak."""
        ring_bell()

        script = (
            f"display notification {applescript_string(message)}"
            f" with title {applescript_string(ALERT_TITLE)}"
            f" subtitle {applescript_string(ALERT_SUBTITLE)}"
            ' sound name "Glass"'
        )
        run_quietly(["osascript", "-e", script])
        run_quietly(["afplay", self.SOUND_FILE])

        if self._voice:
            run_quietly(["say", "-v", self._voice, "-r", str(self._rate), spoken_message])

    def render_dismissible_alert(self, message: str) -> DismissSignal | None:
        """Open a dialog with a Dismiss button."""
        script = (
            f"display dialog {applescript_string(message)}"
            f" with title {applescript_string(ALERT_TITLE)}"
            ' buttons {"Dismiss"} default button "Dismiss" with icon note'
        )
        process = spawn_quietly(["osascript", "-e", script])
        return DismissSignal(process) if process is not None else None


__all__ = ["MacOSAlertRenderer", "applescript_string"]
