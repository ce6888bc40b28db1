"""Event text assembly from hook payloads.

Builds the search corpus for the classifier and parser. Only the fields the
host tool itself fills in are used by default; transcript scanning is opt-in
because conversation text often mentions rate limits without hitting one.
"""

import json
import logging
from collections import deque
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Fields to search per hook event kind
EVENT_FIELDS: dict[str, tuple[str, ...]] = {
    "Notification": ("message", "title"),
    "PostToolUseFailure": ("error", "tool_response"),
}
DEFAULT_FIELDS = ("message", "title", "error")


def _fragment(value: Any) -> str:
    """Render a payload value as searchable text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


def read_transcript_tail(transcript_path: str | Path, max_lines: int) -> str:
    """Read the last lines of a transcript file.

    Args:
        transcript_path: Path to the JSONL transcript.
        max_lines: Number of trailing lines to keep.

    Returns:
        The trailing lines joined by newlines, or "" if unreadable.
    """
    path = Path(transcript_path).expanduser()
    if max_lines <= 0 or not path.is_file():
        return ""

    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            tail = deque(f, maxlen=max_lines)
    except OSError as e:
        logger.debug(f"Could not read transcript {path}: {e}")
        return ""

    return "".join(tail)


def build_event_text(
    payload: dict[str, Any],
    scan_transcript: bool = False,
    tail_lines: int = 20,
) -> str:
    """Build the event text corpus for a hook payload.

    Args:
        payload: Decoded hook JSON.
        scan_transcript: Also search the tail of ``transcript_path``.
        tail_lines: How many transcript lines to include.

    Returns:
        Space-joined text of all non-empty fragments.
    """
    event = payload.get("hook_event_name", "")
    fields = EVENT_FIELDS.get(event, DEFAULT_FIELDS)

    fragments = [_fragment(payload.get(name)) for name in fields]

    if scan_transcript and payload.get("transcript_path"):
        fragments.append(read_transcript_tail(payload["transcript_path"], tail_lines))

    return " ".join(fragment for fragment in fragments if fragment)


__all__ = [
    "DEFAULT_FIELDS",
    "EVENT_FIELDS",
    "build_event_text",
    "read_transcript_tail",
]
