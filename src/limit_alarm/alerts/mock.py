"""Mock alert renderer for testing.

Provides a controllable implementation for unit and integration testing.
Alerts are recorded and logged instead of played.
"""

import logging

from .base import DismissSignal

logger = logging.getLogger(__name__)


class MockAlertRenderer:
    """Mock alert renderer for testing."""

    def __init__(self, supports_dismiss: bool = True, auto_dismiss: bool = False) -> None:
        """Initialize mock renderer.

        Args:
            supports_dismiss: Return a DismissSignal from dismissible alerts
            auto_dismiss: Return signals that are already dismissed
        """
        self._supports_dismiss = supports_dismiss
        self._auto_dismiss = auto_dismiss
        self._alerts: list[tuple[str, str]] = []
        self._dialogs: list[str] = []
        self._signals: list[DismissSignal] = []
        self._fail_alerts = False

    def render_alert(self, message: str, spoken_message: str) -> None:
        """Record an alert."""
        if self._fail_alerts:
            raise RuntimeError("mock alert failure")
        self._alerts.append((message, spoken_message))
        logger.info(f"Mock alert: {message}")

    def render_dismissible_alert(self, message: str) -> DismissSignal | None:
        """Record a dialog and hand back its signal."""
        self._dialogs.append(message)
        logger.info(f"Mock dialog: {message}")
        if not self._supports_dismiss:
            return None

        signal = DismissSignal()
        if self._auto_dismiss:
            signal.set()
        self._signals.append(signal)
        return signal

    def fail_alerts(self, fail: bool = True) -> None:
        """Make render_alert raise, to exercise failure isolation."""
        self._fail_alerts = fail

    def dismiss(self) -> None:
        """Dismiss every dialog shown so far."""
        for signal in self._signals:
            signal.set()

    @property
    def alert_count(self) -> int:
        """Get number of render_alert calls."""
        return len(self._alerts)

    @property
    def dialog_count(self) -> int:
        """Get number of render_dismissible_alert calls."""
        return len(self._dialogs)

    @property
    def alerts(self) -> list[tuple[str, str]]:
        """Get recorded (message, spoken_message) pairs."""
        return self._alerts.copy()

    def clear(self) -> None:
        """Reset mock state."""
        self._alerts.clear()
        self._dialogs.clear()
        self._signals.clear()


__all__ = ["MockAlertRenderer"]
