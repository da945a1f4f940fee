"""Tests for the real-time tick pacer."""

from __future__ import annotations

import pytest

from chip8.scheduler import TickScheduler


def test_first_call_runs_one_tick():
    sched = TickScheduler(rate_hz=10)
    assert sched.next_tick is None
    assert sched.due(100.0) == 1
    assert sched.next_tick == pytest.approx(100.1)


def test_counts_elapsed_periods():
    sched = TickScheduler(rate_hz=10)
    sched.reset(0.0)
    assert sched.due(0.05) == 0
    assert sched.due(0.1) == 1
    assert sched.due(0.35) == 2
    assert sched.seconds_until_next(0.35) == pytest.approx(0.05)


def test_catch_up_is_capped():
    sched = TickScheduler(rate_hz=10, max_catch_up=3)
    sched.reset(0.0)
    assert sched.due(60.0) == 3
    # The schedule restarts from "now" instead of replaying the backlog.
    assert sched.due(60.05) == 0
    assert sched.due(60.15) == 1


def test_disabled_scheduler_never_ticks():
    sched = TickScheduler(enabled=False)
    assert sched.due(0.0) == 0
    assert sched.due(10.0) == 0


def test_seconds_until_next_before_start():
    assert TickScheduler().seconds_until_next(5.0) == 0.0


@pytest.mark.parametrize("rate", [0, -60])
def test_rejects_bad_rate(rate):
    with pytest.raises(ValueError):
        TickScheduler(rate_hz=rate)
