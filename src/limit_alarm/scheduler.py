"""Alarm scheduling state machine.

Waits until the reset time, fires the alert, repeats it once a minute later
unless dismissed, then exits. Runs in its own detached process.

The wait uses two timers on one event loop: a relative ``call_later`` that
fires on time while the machine stays awake, and a periodic wall-clock
re-check that catches the deadline after sleep, when a relative timer can
stall. Whichever sees the deadline first fires; the other is ignored.
"""

import asyncio
import contextlib
import logging
import math
import os
import signal
import time
from enum import Enum
from typing import Any

from .alerts import AlertRenderer, DismissSignal, PushNotifier, create_renderer
from .config import AlarmConfig
from .config.loader import load_config
from .liveness import LivenessStore

logger = logging.getLogger(__name__)

REPEAT_DELAY_SECONDS = 60.0
GRACE_PERIOD_SECONDS = 3.0
DISMISS_POLL_SECONDS = 0.5


class AlarmState(Enum):
    """Lifecycle state of an alarm run."""

    WAITING = "waiting"
    FIRING = "firing"
    AWAITING_REPEAT = "awaiting_repeat"
    REPEATING = "repeating"
    EXITED = "exited"


def resolve_wait_minutes(value: Any, default: float) -> float:
    """Turn a raw wait value into a usable number of minutes.

    Args:
        value: Minutes as a number or numeric string.
        default: Used when value is missing, negative, non-finite or not a number.

    Returns:
        A finite, non-negative number of minutes.
    """
    if isinstance(value, bool):
        return default
    try:
        minutes = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(minutes) or minutes < 0:
        return default
    return minutes


class AlarmScheduler:
    """Drives one alarm from launch to exit.

    Attributes:
        target_time: Wall-clock fire time (epoch seconds).
        state: Current AlarmState.
        fire_count: Number of first fires (0 or 1).
        fired_by: Which timer triggered the fire ("timer" or "recheck").
    """

    def __init__(
        self,
        renderer: AlertRenderer,
        config: AlarmConfig,
        liveness: LivenessStore,
        wait_minutes: float,
        *,
        immediate: bool = False,
        notifier: PushNotifier | None = None,
        recheck_interval: float | None = None,
        repeat_delay: float = REPEAT_DELAY_SECONDS,
        grace_period: float = GRACE_PERIOD_SECONDS,
        dismiss_poll_interval: float = DISMISS_POLL_SECONDS,
    ) -> None:
        """Initialize the scheduler.

        Args:
            renderer: Alert renderer to fire through.
            config: Alarm configuration (messages, defaults).
            liveness: Store holding this alarm's liveness record.
            wait_minutes: Minutes from now until the alarm fires.
            immediate: Fire once right away, without liveness or repeat.
            notifier: Optional push notifier used on the first fire.
            recheck_interval: Seconds between wall-clock re-checks.
                              Defaults to config.recheck_interval_seconds.
            repeat_delay: Seconds from first fire to the repeat.
            grace_period: Seconds to linger after the repeat window.
            dismiss_poll_interval: Seconds between dismiss signal polls.
        """
        self._renderer = renderer
        self._config = config
        self._liveness = liveness
        self._notifier = notifier
        self._immediate = immediate
        self._recheck_interval = (
            recheck_interval if recheck_interval is not None else config.recheck_interval_seconds
        )
        self._repeat_delay = repeat_delay
        self._grace_period = grace_period
        self._dismiss_poll_interval = dismiss_poll_interval
        self._pid = os.getpid()

        self.wait_minutes = 0.0 if immediate else resolve_wait_minutes(
            wait_minutes, config.default_wait_minutes
        )
        self.launched_at = time.time()
        self.target_time = self.launched_at + self.wait_minutes * 60
        self.state = AlarmState.WAITING
        self.fire_count = 0
        self.fired_by: str | None = None

        self._fired = False
        self._cancelled = False
        self._fired_at: float | None = None
        self._dismiss_signal: DismissSignal | None = None
        self._due: asyncio.Event | None = None

    @property
    def immediate(self) -> bool:
        """Whether this is a one-shot test alarm."""
        return self._immediate

    @property
    def is_due(self) -> bool:
        """Check whether the wall clock has reached the target time."""
        return time.time() >= self.target_time

    async def run(self) -> AlarmState:
        """Run the alarm to completion.

        Returns:
            The final state (always EXITED).
        """
        if self._immediate:
            logger.info("Test alarm: firing immediately")
            self._fire(dismissible=False)
            self.state = AlarmState.EXITED
            return self.state

        self._liveness.claim(self._pid)
        logger.info(
            f"Alarm scheduled in {self.wait_minutes:g} minutes "
            f"(at {time.strftime('%Y-%m-%d %H:%M:%S', time.localtime(self.target_time))})"
        )

        try:
            await self._wait_until_due()
            if not self._cancelled:
                await self._alert_until_done()
        finally:
            self._close_dialog()
            self._liveness.release(owner=self._pid)
            self.state = AlarmState.EXITED
            logger.info("Alarm exited")

        return self.state

    async def _alert_until_done(self) -> None:
        """Fire, wait for dismissal or the repeat time, repeat once, linger."""
        self._dismiss_signal = self._fire(dismissible=True)

        self.state = AlarmState.AWAITING_REPEAT
        repeat_at = (self._fired_at or time.time()) + self._repeat_delay
        if await self._await_dismissal(self._dismiss_signal, repeat_at):
            logger.info("Alarm dismissed, skipping repeat")
            return

        self.state = AlarmState.REPEATING
        if self._liveness.exists():
            logger.info("Alarm not dismissed, repeating once")
            self._call_renderer(
                "render_alert",
                self._renderer.render_alert,
                self._config.display_message,
                self._config.spoken_message,
            )

        await asyncio.sleep(self._grace_period)

    def cancel(self) -> None:
        """Cancel the alarm and drop its liveness record.

        Safe to call from a signal handler.
        """
        logger.info(f"Alarm cancelled in state {self.state.value}")
        self._cancelled = True
        self._close_dialog()
        if not self._immediate:
            self._liveness.release(owner=self._pid)
        self.state = AlarmState.EXITED
        if self._due is not None:
            self._due.set()

    def _fast_path_delay(self) -> float:
        """Seconds for the relative timer."""
        return max(0.0, self.target_time - time.time())

    def _trigger(self, source: str) -> bool:
        """Mark the alarm due. Only the first caller wins.

        Args:
            source: Name of the timer that saw the deadline.

        Returns:
            True if this call triggered the fire.
        """
        if self._fired or self._cancelled:
            return False
        self._fired = True
        self.fired_by = source
        logger.debug(f"Alarm due (via {source})")
        if self._due is not None:
            self._due.set()
        return True

    async def _recheck_loop(self) -> None:
        while True:
            await asyncio.sleep(self._recheck_interval)
            if self.is_due:
                self._trigger("recheck")
                return

    async def _wait_until_due(self) -> None:
        loop = asyncio.get_running_loop()
        self._due = asyncio.Event()
        if self._fired or self._cancelled:
            self._due.set()

        fast_path = loop.call_later(self._fast_path_delay(), self._trigger, "timer")
        recheck = asyncio.create_task(self._recheck_loop())
        try:
            await self._due.wait()
        finally:
            fast_path.cancel()
            recheck.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await recheck

    def _fire(self, dismissible: bool) -> DismissSignal | None:
        """Render the first alert."""
        self.state = AlarmState.FIRING
        self.fire_count += 1
        self._fired_at = time.time()
        logger.info("Alarm fired")

        message = self._config.display_message
        self._call_renderer(
            "render_alert", self._renderer.render_alert, message, self._config.spoken_message
        )
        if self._notifier is not None and self._notifier.is_available:
            self._call_renderer("push", self._notifier.send, message)

        if not dismissible:
            return None
        return self._call_renderer(
            "render_dismissible_alert", self._renderer.render_dismissible_alert, message
        )

    def _close_dialog(self) -> None:
        """Close a dialog that is still on screen."""
        if self._dismiss_signal is not None:
            self._dismiss_signal.close()

    def _call_renderer(self, name: str, func: Any, *args: Any) -> Any:
        """Call one alert mechanism, isolating its failure."""
        try:
            return func(*args)
        except Exception as e:
            logger.warning(f"Alert step {name} failed: {e}")
            return None

    async def _await_dismissal(self, dismiss_signal: DismissSignal | None, until: float) -> bool:
        """Wait until the repeat time, returning early on dismissal."""
        while True:
            if self._cancelled:
                return True
            if dismiss_signal is not None and dismiss_signal.dismissed:
                return True
            remaining = until - time.time()
            if remaining <= 0:
                return False
            await asyncio.sleep(min(self._dismiss_poll_interval, remaining))


def run_daemon(
    wait_minutes: Any,
    immediate: bool = False,
    config: AlarmConfig | None = None,
    renderer: AlertRenderer | None = None,
    liveness: LivenessStore | None = None,
) -> int:
    """Run an alarm in the current process until it exits.

    Installs SIGTERM/SIGINT handlers that release the liveness record and
    exit, which is how `stop` dismisses an alarm from another terminal.

    Args:
        wait_minutes: Minutes to wait; unusable values fall back to the default.
        immediate: Fire once now (test alarm).
        config: Configuration. Loaded from disk if not given.
        renderer: Alert renderer. Platform default if not given.
        liveness: Liveness store. Standard location if not given.

    Returns:
        Exit code (always 0)
    """
    config = config or load_config()
    scheduler = AlarmScheduler(
        renderer=renderer or create_renderer(config),
        config=config,
        liveness=liveness or LivenessStore(),
        wait_minutes=wait_minutes,
        immediate=immediate,
        notifier=PushNotifier(),
    )

    def signal_handler(signum: int, _frame: object) -> None:
        logger.info(f"Received signal {signum}, shutting down")
        scheduler.cancel()
        raise SystemExit(0)

    if not immediate:
        signal.signal(signal.SIGTERM, signal_handler)
        signal.signal(signal.SIGINT, signal_handler)

    asyncio.run(scheduler.run())
    return 0


__all__ = [
    "AlarmScheduler",
    "AlarmState",
    "resolve_wait_minutes",
    "run_daemon",
]
