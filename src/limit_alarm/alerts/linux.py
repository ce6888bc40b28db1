"""Linux alert renderer using notify-send, espeak/spd-say and PulseAudio/ALSA."""

import logging
import shutil

from .base import ALERT_TITLE, DismissSignal, ring_bell, run_quietly, spawn_quietly

logger = logging.getLogger(__name__)


class LinuxAlertRenderer:
    """Alert renderer for Linux desktops.

    The voice setting names the speech engine ("espeak" or "spd-say").
    """

    SOUND_FILE = "/usr/share/sounds/freedesktop/stereo/complete.oga"

    def __init__(self, voice: str | None = None, rate: int = 165) -> None:
        """Initialize Linux renderer.

        Args:
            voice: Speech engine, "espeak" or "spd-say"; anything else is silent
            rate: Speech rate in words per minute
        """
        self._voice = voice
        self._rate = rate

    def render_alert(self, message: str, spoken_message: str) -> None:
        """Show notification, speak, play chime."""
        ring_bell()
        run_quietly(["notify-send", "-u", "normal", ALERT_TITLE, message])

        if self._voice == "espeak":
            run_quietly(["espeak", "-s", str(self._rate), spoken_message])
        elif self._voice == "spd-say":
            run_quietly(["spd-say", "--wait", spoken_message])

        if not run_quietly(["paplay", self.SOUND_FILE]):
            run_quietly(["aplay", self.SOUND_FILE])

    def render_dismissible_alert(self, message: str) -> DismissSignal | None:
        """Open a zenity info dialog when zenity is installed."""
        if shutil.which("zenity") is None:
            return None

        process = spawn_quietly(
            ["zenity", "--info", "--title", ALERT_TITLE, "--text", message, "--ok-label", "Dismiss"]
        )
        return DismissSignal(process) if process is not None else None


__all__ = ["LinuxAlertRenderer"]
