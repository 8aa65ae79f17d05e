from __future__ import annotations

from stock_game.adapters.manual_scheduler import ManualScheduler


def test_advance_fires_in_due_order() -> None:
    sched = ManualScheduler()
    fired = []
    sched.call_later(300, lambda: fired.append("b"))
    sched.call_later(100, lambda: fired.append("a"))
    sched.call_later(301, lambda: fired.append("c"))

    assert sched.advance(300) == 2
    assert fired == ["a", "b"]
    assert sched.now_ms == 300
    assert sched.pending == 1


def test_same_due_time_keeps_insertion_order() -> None:
    sched = ManualScheduler()
    fired = []
    for name in "xyz":
        sched.call_later(50, lambda n=name: fired.append(n))
    sched.advance(50)
    assert fired == ["x", "y", "z"]


def test_cancelled_call_never_fires() -> None:
    sched = ManualScheduler()
    fired = []
    call = sched.call_later(10, lambda: fired.append(1))
    call.cancel()

    assert not call.active
    assert sched.pending == 0
    assert sched.advance(100) == 0
    assert fired == []


def test_calls_scheduled_during_advance_fire_when_due() -> None:
    sched = ManualScheduler()
    times = []

    def tick() -> None:
        times.append(sched.now_ms)
        if len(times) < 5:
            sched.call_later(300, tick)

    sched.call_later(300, tick)
    sched.advance(1000)

    assert times == [300, 600, 900]
    assert sched.pending == 1


def test_run_next_and_run_until_idle() -> None:
    sched = ManualScheduler()
    fired = []
    sched.call_later(500, lambda: fired.append(500))
    sched.call_later(200, lambda: fired.append(200))

    assert sched.run_next()
    assert sched.now_ms == 200
    assert sched.run_until_idle() == 1
    assert fired == [200, 500]
    assert not sched.run_next()


def test_call_deactivates_after_firing() -> None:
    sched = ManualScheduler()
    call = sched.call_later(0, lambda: None)
    assert call.active
    sched.advance(0)
    assert not call.active
