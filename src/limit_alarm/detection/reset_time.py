"""Reset-time extraction.

Turns the time expressions that appear in rate-limit messages ("in 2 hours",
"retry-after: 90", "resets at 3:00 PM") into a number of minutes to wait.
Durations are rounded up so the alarm never fires before the reset.
"""

import math
import re
from datetime import datetime, timedelta

_RELATIVE_HOURS = re.compile(r"\bin\s+(\d+\.?\d*)\s*hours?\b", re.IGNORECASE)
_RELATIVE_MINUTES = re.compile(r"\bin\s+(\d+)\s*minutes?\b", re.IGNORECASE)
_RELATIVE_SECONDS = re.compile(r"\bin\s+(\d+)\s*seconds?\b", re.IGNORECASE)
_RETRY_AFTER = re.compile(r"retry.?after[\s:]+(\d+)", re.IGNORECASE)
_CLOCK_12H = re.compile(r"\b(\d{1,2}):(\d{2})\s*(AM|PM)\b", re.IGNORECASE)
_CLOCK_24H = re.compile(r"\b(?:at|until|by)\s+(\d{1,2}):(\d{2})", re.IGNORECASE)

_CLI_DURATION = re.compile(r"^(?:(\d+\.?\d*)h|(\d+)m|(\d+)s|(\d+))$")


def minutes_until(hour: int, minute: int, now: datetime) -> int:
    """Minutes until the next occurrence of a wall-clock time.

    A time equal to or before ``now`` is taken to mean tomorrow.

    Args:
        hour: Hour of day (0-23).
        minute: Minute (0-59).
        now: Current wall-clock time.

    Returns:
        Whole minutes to wait, at least 1.
    """
    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    delta_minutes = (target - now).total_seconds() / 60
    return max(1, math.ceil(delta_minutes))


def _from_12h_clock(text: str, now: datetime) -> int | None:
    match = _CLOCK_12H.search(text)
    if not match:
        return None

    hours = int(match.group(1))
    minutes = int(match.group(2))
    if not (1 <= hours <= 12 and 0 <= minutes <= 59):
        return None

    meridiem = match.group(3).upper()
    if meridiem == "PM" and hours != 12:
        hours += 12
    if meridiem == "AM" and hours == 12:
        hours = 0
    return minutes_until(hours, minutes, now)


def _from_24h_clock(text: str, now: datetime) -> int | None:
    match = _CLOCK_24H.search(text)
    if not match:
        return None

    hours = int(match.group(1))
    minutes = int(match.group(2))
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return None
    return minutes_until(hours, minutes, now)


def parse_reset_minutes(text: str | None, now: datetime | None = None) -> float | None:
    """Extract how long to wait until a rate limit resets.

    Patterns are tried in order and the first match wins:
    relative hours, relative minutes, relative seconds, retry-after seconds,
    12-hour clock time, then 24-hour clock time after "at/until/by".

    Args:
        text: Event text corpus.
        now: Current wall-clock time. Defaults to local time.

    Returns:
        A positive number of minutes to wait, or None if no usable time
        expression was found ("in 0 minutes" counts as unknown).

    Examples:
        >>> parse_reset_minutes("limit resets in 1.5 hours")
        90
        >>> parse_reset_minutes("retry-after: 90")
        2
    """
    if not text:
        return None

    match = _RELATIVE_HOURS.search(text)
    if match:
        minutes = math.ceil(float(match.group(1)) * 60)
        return minutes if minutes > 0 else None

    match = _RELATIVE_MINUTES.search(text)
    if match:
        minutes = int(match.group(1))
        return minutes if minutes > 0 else None

    match = _RELATIVE_SECONDS.search(text)
    if match:
        return max(0.5, int(match.group(1)) / 60)

    match = _RETRY_AFTER.search(text)
    if match:
        return max(1, math.ceil(int(match.group(1)) / 60))

    if now is None:
        now = datetime.now().astimezone()

    minutes = _from_12h_clock(text, now)
    if minutes is not None:
        return minutes

    return _from_24h_clock(text, now)


def parse_duration(expression: str | None) -> float | None:
    """Parse a CLI time expression into minutes.

    Accepts "Nh" (decimal allowed), "Nm", "Ns" or a bare number of minutes.

    Args:
        expression: Time expression, e.g. "4h", "30m", "90s", "120".

    Returns:
        Minutes to wait, or None if the expression is invalid or not positive.

    Examples:
        >>> parse_duration("4h")
        240
        >>> parse_duration("90s")
        1.5
    """
    if not expression:
        return None

    match = _CLI_DURATION.match(expression.strip().lower())
    if not match:
        return None

    hours, minutes, seconds, bare = match.groups()
    if hours is not None:
        result: float = math.ceil(float(hours) * 60)
    elif minutes is not None:
        result = int(minutes)
    elif seconds is not None:
        result = int(seconds) / 60
    else:
        result = int(bare)

    return result if result > 0 else None


def format_duration(minutes: float) -> str:
    """Format a wait in minutes as a short human-readable string.

    Examples:
        >>> format_duration(90)
        '1h 30m'
        >>> format_duration(0.5)
        '30s'
    """
    total_seconds = max(0, round(minutes * 60))
    hours, remainder = divmod(total_seconds, 3600)
    mins, secs = divmod(remainder, 60)

    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if mins > 0:
        parts.append(f"{mins}m")
    if secs > 0 and hours == 0:
        parts.append(f"{secs}s")

    return " ".join(parts) if parts else "0s"


__all__ = [
    "format_duration",
    "minutes_until",
    "parse_duration",
    "parse_reset_minutes",
]
