"""
Tick Schedulers

A scheduler delivers a recurring callback to the round timer. Every
scheduler exposes ``schedule_interval(seconds, callback)`` returning a
handle with ``cancel()``.
"""

import itertools
import logging
from typing import Callable, List

logger = logging.getLogger(__name__)


class ScheduledHandle:
    """Cancellation handle for a recurring callback."""

    def __init__(self):
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class _ManualJob(ScheduledHandle):
    def __init__(self, seq: int, interval: float, next_run: float, callback: Callable[[], None]):
        super().__init__()
        self.seq = seq
        self.interval = interval
        self.next_run = next_run
        self.callback = callback


class ManualScheduler:
    """
    Virtual clock for deterministic timers.

    Nothing runs until ``advance`` is called; due callbacks then fire in
    time order, each one exactly once per elapsed interval.
    """

    def __init__(self):
        self.now = 0.0
        self._jobs: List[_ManualJob] = []
        self._seq = itertools.count()

    def schedule_interval(self, seconds: float, callback: Callable[[], None]) -> ScheduledHandle:
        job = _ManualJob(next(self._seq), seconds, self.now + seconds, callback)
        self._jobs.append(job)
        return job

    @property
    def active_jobs(self) -> int:
        return sum(1 for job in self._jobs if not job.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing every callback that comes due."""
        target = self.now + seconds
        while True:
            due = [job for job in self._jobs if not job.cancelled and job.next_run <= target]
            if not due:
                break
            job = min(due, key=lambda j: (j.next_run, j.seq))
            self.now = job.next_run
            job.next_run += job.interval
            job.callback()
        self.now = target
        self._jobs = [job for job in self._jobs if not job.cancelled]


class BackgroundTaskScheduler:
    """Runs recurring callbacks as Flask-SocketIO background tasks."""

    def __init__(self, socketio):
        self.socketio = socketio

    def schedule_interval(self, seconds: float, callback: Callable[[], None]) -> ScheduledHandle:
        handle = ScheduledHandle()
        self.socketio.start_background_task(self._run, seconds, callback, handle)
        return handle

    def _run(self, seconds: float, callback: Callable[[], None], handle: ScheduledHandle) -> None:
        while not handle.cancelled:
            self.socketio.sleep(seconds)
            if handle.cancelled:
                return
            try:
                callback()
            except Exception:
                logger.exception("Scheduled callback failed; cancelling its tick source")
                handle.cancel()
