"""
Round Timer

Countdown state machine driving round pacing. Ticks come from an injected
scheduler, so tests can drive the timer with a virtual clock.
"""

import logging
import threading
from typing import Callable, Optional

from ..config.game_settings import TICK_INTERVAL_SECONDS, TIMER_WARNING_SECONDS
from ..models.game import TimerDisplay, TimerStatus
from .errors import InvalidTimerConfiguration

logger = logging.getLogger(__name__)


def compute_display(remaining: int, total: int) -> TimerDisplay:
    """Render payload for a remaining/total pair."""
    return TimerDisplay(
        remaining=remaining,
        total=total,
        warning=remaining <= TIMER_WARNING_SECONDS,
        fraction=remaining / total,
    )


class CountdownTimer:
    """
    One-second countdown with idle, running and stopped states.

    Each tick decrements the remaining time by exactly one second, however
    late the tick arrives. Reaching zero stops the timer and calls
    ``on_end`` once; ``stop()`` cancels without calling it.
    """

    def __init__(self,
                 total_seconds: int,
                 on_tick: Optional[Callable[[int], None]] = None,
                 on_end: Optional[Callable[[], None]] = None,
                 on_render: Optional[Callable[[TimerDisplay], None]] = None,
                 scheduler=None):
        if isinstance(total_seconds, bool) or not isinstance(total_seconds, int) or total_seconds <= 0:
            raise InvalidTimerConfiguration(
                f"total_seconds must be a positive integer, got {total_seconds!r}"
            )

        self.total = total_seconds
        self.remaining = total_seconds
        self.on_tick = on_tick
        self.on_end = on_end
        self.on_render = on_render
        self.scheduler = scheduler
        self.status = TimerStatus.IDLE
        self.expired = False

        self._handle = None
        self._lock = threading.RLock()
        self._render(self.display)

    @property
    def running(self) -> bool:
        return self.status is TimerStatus.RUNNING

    @property
    def display(self) -> TimerDisplay:
        return compute_display(self.remaining, self.total)

    def start(self) -> bool:
        """
        Begin ticking.

        Returns:
            True if a tick source was scheduled, False when the timer was
            already running or has already expired
        """
        with self._lock:
            if self.status is TimerStatus.RUNNING or self.expired:
                return False
            if self.scheduler is None:
                raise RuntimeError("CountdownTimer needs a scheduler to start")

            self.status = TimerStatus.RUNNING
            self._handle = self.scheduler.schedule_interval(TICK_INTERVAL_SECONDS, self._tick)
            return True

    def stop(self) -> None:
        """Cancel ticking. Safe to call from any state."""
        with self._lock:
            self._cancel_handle()
            if self.status is TimerStatus.RUNNING:
                self.status = TimerStatus.STOPPED
            display = self.display
        self._render(display)

    def _tick(self) -> None:
        # Callbacks are invoked after the lock is released.
        with self._lock:
            if self.status is not TimerStatus.RUNNING:
                logger.debug("Ignoring tick delivered to a timer that is not running")
                return

            self.remaining = max(0, self.remaining - 1)
            remaining = self.remaining
            finished = remaining == 0
            if finished:
                self.status = TimerStatus.STOPPED
                self.expired = True
                self._cancel_handle()
            display = self.display

        self._render(display)
        if self.on_tick:
            self.on_tick(remaining)
        if finished and self.on_end:
            self.on_end()

    def _cancel_handle(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _render(self, display: TimerDisplay) -> None:
        if self.on_render:
            self.on_render(display)

    def to_dict(self) -> dict:
        display = self.display
        return {
            "status": self.status.value,
            "remaining": display.remaining,
            "total": display.total,
            "warning": display.warning,
            "fraction": display.fraction,
        }
