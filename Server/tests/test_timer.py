import threading

import pytest

from wordwar.engine import CountdownTimer, InvalidTimerConfiguration, ManualScheduler, compute_display
from wordwar.models import TimerStatus


class Recorder:
    def __init__(self):
        self.ticks = []
        self.ends = 0
        self.renders = []

    def on_tick(self, remaining):
        self.ticks.append(remaining)

    def on_end(self):
        self.ends += 1

    def on_render(self, display):
        self.renders.append(display)


def make_timer(total, scheduler, recorder):
    return CountdownTimer(
        total,
        on_tick=recorder.on_tick,
        on_end=recorder.on_end,
        on_render=recorder.on_render,
        scheduler=scheduler,
    )


@pytest.mark.parametrize("total", [0, -5, 2.5, "10", True, None])
def test_rejects_invalid_totals(total):
    with pytest.raises(InvalidTimerConfiguration):
        CountdownTimer(total)


def test_runs_down_and_fires_end_once():
    scheduler, rec = ManualScheduler(), Recorder()
    timer = make_timer(5, scheduler, rec)
    timer.start()

    scheduler.advance(5)

    assert timer.remaining == 0
    assert rec.ticks == [4, 3, 2, 1, 0]
    assert rec.ends == 1
    assert timer.status is TimerStatus.STOPPED
    assert scheduler.active_jobs == 0

    scheduler.advance(10)
    timer.stop()
    assert rec.ends == 1
    assert timer.remaining == 0


def test_stop_before_first_tick():
    scheduler, rec = ManualScheduler(), Recorder()
    timer = make_timer(5, scheduler, rec)
    timer.start()
    timer.stop()
    scheduler.advance(10)

    assert timer.remaining == 5
    assert rec.ends == 0
    assert rec.ticks == []
    assert timer.status is TimerStatus.STOPPED


def test_stop_is_idempotent_from_any_state():
    scheduler, rec = ManualScheduler(), Recorder()
    timer = make_timer(3, scheduler, rec)
    timer.stop()
    assert timer.status is TimerStatus.IDLE
    timer.start()
    timer.stop()
    timer.stop()
    assert timer.status is TimerStatus.STOPPED
    assert rec.ends == 0


def test_double_start_keeps_single_tick_source():
    scheduler, rec = ManualScheduler(), Recorder()
    timer = make_timer(5, scheduler, rec)
    assert timer.start() is True
    assert timer.start() is False
    assert scheduler.active_jobs == 1

    scheduler.advance(1)
    assert timer.remaining == 4


def test_restart_after_stop_resumes():
    scheduler, rec = ManualScheduler(), Recorder()
    timer = make_timer(5, scheduler, rec)
    timer.start()
    scheduler.advance(2)
    timer.stop()
    scheduler.advance(5)
    assert timer.remaining == 3

    timer.start()
    scheduler.advance(3)
    assert timer.remaining == 0
    assert rec.ends == 1


def test_cannot_restart_after_expiry():
    scheduler, rec = ManualScheduler(), Recorder()
    timer = make_timer(1, scheduler, rec)
    timer.start()
    scheduler.advance(1)
    assert timer.start() is False
    scheduler.advance(5)
    assert rec.ends == 1


def test_start_without_scheduler():
    timer = CountdownTimer(5)
    with pytest.raises(RuntimeError):
        timer.start()


def test_display_recomputed_on_every_change():
    scheduler, rec = ManualScheduler(), Recorder()
    timer = make_timer(12, scheduler, rec)
    assert rec.renders[0].remaining == 12
    assert rec.renders[0].fraction == 1.0
    assert rec.renders[0].warning is False

    timer.start()
    scheduler.advance(2)
    assert rec.renders[-1].remaining == 10
    assert rec.renders[-1].warning is True

    timer.stop()
    assert len(rec.renders) == 4
    assert timer.display == compute_display(10, 12)


def test_compute_display():
    display = compute_display(15, 60)
    assert display.fraction == 0.25
    assert display.warning is False
    assert compute_display(0, 60).warning is True


def test_manual_scheduler_cancel():
    scheduler = ManualScheduler()
    calls = []
    handle = scheduler.schedule_interval(1, lambda: calls.append(scheduler.now))
    scheduler.advance(2)
    handle.cancel()
    scheduler.advance(5)
    assert calls == [1.0, 2.0]
    assert scheduler.active_jobs == 0


def test_callbacks_run_without_holding_the_lock():
    scheduler = ManualScheduler()
    lock_free = []

    def try_lock():
        if timer._lock.acquire(blocking=False):
            timer._lock.release()
            lock_free.append(True)
        else:
            lock_free.append(False)

    def check(*args):
        # Another thread can only take the lock if this callback does not hold it
        worker = threading.Thread(target=try_lock)
        worker.start()
        worker.join()

    timer = CountdownTimer(2, on_tick=check, on_end=check, scheduler=scheduler)
    timer.on_render = check
    timer.start()
    scheduler.advance(1)
    timer.stop()
    timer.start()
    scheduler.advance(1)

    assert lock_free == [True] * 6
