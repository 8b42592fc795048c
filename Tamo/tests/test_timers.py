import pytest

from timers import TickScheduler


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_fires_once_per_interval():
    clock = Clock()
    sched = TickScheduler(clock=clock)
    fired = []
    sched.schedule_repeating(3.0, lambda: fired.append(clock.now))
    clock.now = 2.9
    assert sched.run_due() == 0
    clock.now = 3.0
    assert sched.run_due() == 1
    clock.now = 10.0
    assert sched.run_due() == 2
    assert len(fired) == 3


def test_cancel_is_idempotent():
    clock = Clock()
    sched = TickScheduler(clock=clock)
    handle = sched.schedule_repeating(1.0, lambda: None)
    sched.cancel(handle)
    sched.cancel(handle)
    sched.cancel(None)
    assert sched.active_count == 0
    clock.now = 5.0
    assert sched.run_due() == 0


def test_callback_can_swap_timers():
    clock = Clock()
    sched = TickScheduler(clock=clock)
    calls = []
    state = {}

    def first():
        calls.append("first")
        sched.cancel(state["first"])
        state["second"] = sched.schedule_repeating(1.0, lambda: calls.append("second"))

    state["first"] = sched.schedule_repeating(1.0, first)
    # Several intervals late: the cancelled timer stops, the new one waits a pass
    clock.now = 5.0
    assert sched.run_due() == 1
    assert calls == ["first"]
    clock.now = 6.0
    assert sched.run_due() == 1
    assert calls == ["first", "second"]


def test_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        TickScheduler().schedule_repeating(0, lambda: None)


def test_cancel_all():
    sched = TickScheduler(clock=Clock())
    sched.schedule_repeating(1.0, lambda: None)
    sched.schedule_repeating(2.0, lambda: None)
    sched.cancel_all()
    assert sched.active_count == 0
