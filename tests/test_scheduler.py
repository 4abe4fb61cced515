"""Unit tests for the deferred-task schedulers."""
import asyncio

from dropvault.uploads.scheduler import AsyncioScheduler, ManualScheduler


def test_manual_fires_at_due_time_not_before():
    sched = ManualScheduler()
    fired = []
    sched.call_later(1.0, lambda: fired.append("x"))

    assert sched.run_until(0.5) == 0
    assert fired == []
    assert sched.run_until(1.0) == 1
    assert fired == ["x"]
    assert sched.now == 1.0


def test_manual_cancelled_handle_never_fires():
    sched = ManualScheduler()
    fired = []
    handle = sched.call_later(1.0, lambda: fired.append("x"))
    handle.cancel()

    assert sched.pending() == 0
    sched.advance(10)
    assert fired == []


def test_manual_same_instant_keeps_scheduling_order():
    sched = ManualScheduler()
    fired = []
    for label in "abc":
        sched.call_later(2.0, lambda label=label: fired.append(label))
    sched.advance(2.0)
    assert fired == ["a", "b", "c"]


def test_manual_callbacks_scheduled_while_running_are_picked_up():
    sched = ManualScheduler()
    fired = []

    def chain():
        fired.append(sched.now)
        if len(fired) < 3:
            sched.call_later(1.0, chain)

    sched.call_later(1.0, chain)
    sched.run_until(10.0)
    assert fired == [1.0, 2.0, 3.0]
    assert sched.now == 10.0


def test_manual_negative_delay_runs_on_next_pump():
    sched = ManualScheduler(start=5.0)
    fired = []
    sched.call_later(-1.0, lambda: fired.append(sched.now))
    sched.run_until(5.0)
    assert fired == [5.0]


def test_asyncio_scheduler_runs_and_cancels_on_loop():
    async def scenario():
        sched = AsyncioScheduler()
        fired = []
        sched.call_later(0.01, lambda: fired.append("kept"))
        dropped = sched.call_later(0.01, lambda: fired.append("dropped"))
        dropped.cancel()
        await asyncio.sleep(0.05)
        return fired

    assert asyncio.run(scenario()) == ["kept"]
