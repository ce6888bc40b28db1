"""Rate-limit detection for limit-alarm.

Pure text processing: no I/O apart from reading a transcript tail when
asked to.
"""

from .classifier import is_rate_limited, matched_indicator
from .event_text import build_event_text
from .reset_time import format_duration, parse_duration, parse_reset_minutes

__all__ = [
    "build_event_text",
    "format_duration",
    "is_rate_limited",
    "matched_indicator",
    "parse_duration",
    "parse_reset_minutes",
]
