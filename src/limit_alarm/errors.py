"""Error types for limit-alarm.

Raised on the interactive CLI paths only. The hook and the alarm daemon
degrade to safe defaults instead of raising.
"""


class AlarmError(Exception):
    """Base exception for alarm-related errors."""

    pass


class AlarmAlreadyActiveError(AlarmError):
    """Raised when starting an alarm while another one is live."""

    def __init__(self, pid: int | None = None) -> None:
        """Initialize the error.

        Args:
            pid: PID of the alarm process that is already running.
        """
        super().__init__(f"Alarm already active (PID: {pid})")
        self.pid = pid


class InvalidDurationError(AlarmError):
    """Raised when a time expression cannot be turned into a wait."""

    def __init__(self, expression: str) -> None:
        """Initialize the error.

        Args:
            expression: The rejected time expression.
        """
        super().__init__(f"Invalid time: {expression!r}")
        self.expression = expression


__all__ = [
    "AlarmAlreadyActiveError",
    "AlarmError",
    "InvalidDurationError",
]
