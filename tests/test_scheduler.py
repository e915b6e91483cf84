"""Tests for the periodic target cycle scheduler."""

import asyncio
import json
from datetime import datetime

from salesboard.domain.cycle_reset import CycleResetEngine, ResetPassResult
from salesboard.realtime.broadcast import BroadcastHub
from salesboard.realtime.scheduler import CycleScheduler


class RecordingHub(BroadcastHub):
    def __init__(self):
        super().__init__()
        self.events = []

    async def broadcast(self, event_type, data=None):
        self.events.append((event_type, json.loads(json.dumps(data, default=str))))
        return 0


class StubEngine:
    """Counts passes; optionally blocks or fails."""

    def __init__(self, fail_times=0):
        self.passes = 0
        self.fail_times = fail_times

    def initialize_target_cycles(self):
        return ResetPassResult()

    def check_and_reset(self):
        self.passes += 1
        if self.passes <= self.fail_times:
            raise RuntimeError("database unavailable")
        return ResetPassResult()


def test_run_pass_broadcasts_each_transition(temp_db, sample_agent, clock):
    engine = CycleResetEngine(temp_db, clock=clock)
    hub = RecordingHub()
    scheduler = CycleScheduler(engine, hub)

    async def scenario():
        await scheduler.initialize()
        clock.now = datetime(2024, 4, 2)
        return await scheduler.run_pass()

    result = asyncio.run(scenario())

    assert len(result.transitions) == 2
    types = [event_type for event_type, _ in hub.events]
    assert types == ["target_cycles_initialized", "target_cycle_reset", "target_cycle_reset"]
    reset_payload = hub.events[1][1]
    assert reset_payload["entity_type"] in {"agent", "team"}
    assert reset_payload["closed_period_start"] == "2024-03-01 00:00:00"


def test_initialize_without_new_cycles_broadcasts_nothing(temp_db, sample_agent, clock):
    engine = CycleResetEngine(temp_db, clock=clock)
    engine.initialize_target_cycles()
    hub = RecordingHub()

    asyncio.run(CycleScheduler(engine, hub).initialize())

    assert hub.events == []


def test_run_pass_skips_while_another_is_in_progress():
    scheduler = CycleScheduler(StubEngine(), RecordingHub())
    scheduler._in_progress = True

    result = asyncio.run(scheduler.run_pass())

    assert result is None
    assert scheduler.engine.passes == 0


def test_in_progress_flag_cleared_after_failure():
    scheduler = CycleScheduler(StubEngine(fail_times=1), RecordingHub())

    async def scenario():
        try:
            await scheduler.run_pass()
        except RuntimeError:
            pass
        return await scheduler.run_pass()

    result = asyncio.run(scenario())

    assert result is not None
    assert not scheduler.in_progress


def test_loop_keeps_running_after_a_failed_pass():
    engine = StubEngine(fail_times=2)
    ticks = []

    async def fast_sleep(seconds):
        ticks.append(seconds)
        await asyncio.sleep(0)

    scheduler = CycleScheduler(engine, RecordingHub(), interval=30, sleep=fast_sleep)

    async def scenario():
        await scheduler.start()
        while engine.passes < 5:
            await asyncio.sleep(0)
        await scheduler.stop()

    asyncio.run(scenario())

    assert engine.passes >= 5
    assert set(ticks) == {30}
    assert not scheduler.running


def test_start_and_stop():
    scheduler = CycleScheduler(StubEngine(), RecordingHub(), interval=3600)

    async def scenario():
        await scheduler.start()
        started = scheduler.running
        await scheduler.stop()
        return started

    assert asyncio.run(scenario()) is True
    assert not scheduler.running


def test_stop_without_start_is_harmless():
    scheduler = CycleScheduler(StubEngine(), RecordingHub())
    asyncio.run(scheduler.stop())
    assert not scheduler.running
