"""Windows alert renderer using PowerShell speech and message boxes."""

import logging

from .base import ALERT_TITLE, DismissSignal, ring_bell, run_quietly, spawn_quietly

logger = logging.getLogger(__name__)


def powershell_string(text: str) -> str:
    """Quote text as a single-quoted PowerShell string literal."""
    return "'" + text.replace("'", "''") + "'"


class WindowsAlertRenderer:
    """Alert renderer for Windows."""

    def __init__(self, voice: str | None = "powershell") -> None:
        """Initialize Windows renderer.

        Args:
            voice: Any value enables System.Speech; None stays silent
        """
        self._voice = voice

    def render_alert(self, message: str, spoken_message: str) -> None:
        """Speak the message."""
        ring_bell()
        if not self._voice:
            return

        script = (
            "Add-Type -AssemblyName System.Speech; "
            "$synth = New-Object System.Speech.Synthesis.SpeechSynthesizer; "
            "$synth.Rate = 0; "
            f"$synth.Speak({powershell_string(spoken_message)})"
        )
        run_quietly(["powershell", "-NoProfile", "-Command", script])

    def render_dismissible_alert(self, message: str) -> DismissSignal | None:
        """Open a message box."""
        script = (
            "Add-Type -AssemblyName PresentationFramework; "
            f"[System.Windows.MessageBox]::Show({powershell_string(message)}, "
            f"{powershell_string(ALERT_TITLE)}, 'OK', 'Information') | Out-Null"
        )
        process = spawn_quietly(["powershell", "-NoProfile", "-Command", script])
        return DismissSignal(process) if process is not None else None


__all__ = ["WindowsAlertRenderer", "powershell_string"]
