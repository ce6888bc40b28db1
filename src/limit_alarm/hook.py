"""Hook entry point.

Called by the assistant's Notification, Stop and PostToolUseFailure hooks
with a JSON payload on stdin. If the payload reports a rate limit and no
alarm is running yet, schedules one in the background and exits.

Nothing here may hang the caller: the whole decision path runs under a
hard deadline and every failure resolves to exit code 0.
"""

import json
import logging
import os
import sys
import threading
from collections.abc import Callable
from typing import Any, TextIO

from .config import AlarmConfig
from .config.loader import load_config
from .detection import build_event_text, matched_indicator, parse_reset_minutes
from .launcher import spawn_daemon
from .liveness import LivenessStore

logger = logging.getLogger(__name__)

# Host hook timeout is 10s
HOOK_DEADLINE_SECONDS = 8.0


def arm_deadline(seconds: float = HOOK_DEADLINE_SECONDS) -> threading.Timer:
    """Force the process to exit cleanly after ``seconds``.

    Returns:
        The running timer; cancel it once the hook is done.
    """
    timer = threading.Timer(seconds, os._exit, args=(0,))
    timer.daemon = True
    timer.start()
    return timer


def handle_payload(
    payload: dict[str, Any],
    config: AlarmConfig,
    liveness: LivenessStore,
    spawn: Callable[[float], int] = spawn_daemon,
) -> float | None:
    """Decide whether a hook payload should start an alarm, and start it.

    Args:
        payload: Decoded hook JSON.
        config: Alarm configuration.
        liveness: Liveness store to consult.
        spawn: Launches the daemon with a wait in minutes.

    Returns:
        The wait in minutes if an alarm was started, else None.
    """
    text = build_event_text(
        payload,
        scan_transcript=config.scan_transcript,
        tail_lines=config.transcript_tail_lines,
    )

    indicator = matched_indicator(text)
    if indicator is None:
        return None
    logger.info(f"Rate limit detected ({payload.get('hook_event_name', 'unknown')}): {indicator}")

    if liveness.is_active():
        logger.info("Alarm already active, not starting another")
        return None

    wait_minutes = parse_reset_minutes(text)
    if not wait_minutes:
        wait_minutes = config.default_wait_minutes
        logger.info(f"No reset time found, using default {wait_minutes:g} min")
    else:
        logger.info(f"Reset in {wait_minutes:g} min")

    spawn(wait_minutes)
    return wait_minutes


def run_hook(
    stream: TextIO | None = None,
    config: AlarmConfig | None = None,
    liveness: LivenessStore | None = None,
    spawn: Callable[[float], int] = spawn_daemon,
    deadline_seconds: float = HOOK_DEADLINE_SECONDS,
    deadline: threading.Timer | None = None,
) -> int:
    """Run the hook: read stdin, maybe start an alarm, always exit 0.

    Args:
        deadline: A deadline the caller already armed. If None, one is
                  armed here for deadline_seconds.

    Returns:
        Exit code (always 0)
    """
    deadline = deadline or arm_deadline(deadline_seconds)
    try:
        raw = (stream or sys.stdin).read()
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.debug(f"Ignoring malformed hook payload: {e}")
            return 0

        if not isinstance(payload, dict):
            logger.debug("Ignoring hook payload that is not an object")
            return 0

        handle_payload(
            payload,
            config=config or load_config(),
            liveness=liveness or LivenessStore(),
            spawn=spawn,
        )
    except Exception as e:
        logger.error(f"Hook failed: {e}")
    finally:
        deadline.cancel()

    return 0


__all__ = [
    "HOOK_DEADLINE_SECONDS",
    "arm_deadline",
    "handle_payload",
    "run_hook",
]
