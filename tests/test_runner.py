"""
Unit tests for run modes and the daily cadence.

The daily runner is driven by a simulated clock: sleeping advances time.
"""

import pytest
from unittest.mock import MagicMock
import sys
from pathlib import Path

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from autoswap.trading.runner import DAILY, MANUAL, DailyRunner, RunMode, run

DAY = 24 * 3600


class FakeClock:
    """Simulated monotonic clock."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def make_runner(clock, batch_seconds=0.0, on_batch=None):
    """Daily runner over a mock scheduler that records batch start times."""
    scheduler = MagicMock()
    starts = []

    def run_cycles(count):
        starts.append(clock.now)
        clock.now += batch_seconds
        if on_batch:
            on_batch()
        return [f"cycle-{i}" for i in range(count)]

    scheduler.run_cycles.side_effect = run_cycles
    runner = DailyRunner(scheduler, cycles_per_batch=3, interval_seconds=DAY, clock=clock, sleep=clock.sleep)
    return runner, scheduler, starts


class TestRunMode:
    """Test command-line resolution."""

    def test_daily_flag_wins(self):
        assert RunMode.resolve(cycles=5, daily=True) == RunMode(DAILY)

    def test_explicit_cycles(self):
        mode = RunMode.resolve(cycles=5)
        assert mode.mode == MANUAL
        assert mode.cycle_count == 5
        assert not mode.is_daily

    def test_nothing_given_needs_prompt(self):
        assert RunMode.resolve() is None

    def test_invalid_modes(self):
        with pytest.raises(ValueError):
            RunMode(MANUAL, 0)
        with pytest.raises(ValueError):
            RunMode("weekly")


class TestDailyRunner:
    """Test the 24 hour cadence."""

    def test_first_batch_runs_immediately(self):
        clock = FakeClock()
        runner, scheduler, starts = make_runner(clock)

        results = runner.run(max_batches=1)

        assert starts == [0.0]
        assert clock.sleeps == []
        scheduler.run_cycles.assert_called_once_with(3)
        assert results == [["cycle-0", "cycle-1", "cycle-2"]]

    def test_one_batch_per_elapsed_interval(self):
        clock = FakeClock()
        runner, scheduler, starts = make_runner(clock, batch_seconds=3600)

        runner.run(max_batches=4)

        assert starts == [0.0, DAY, 2 * DAY, 3 * DAY]
        assert runner.batches_run == 4
        assert runner.slots_skipped == 0

    def test_no_batch_before_interval_elapses(self):
        clock = FakeClock()
        runner, scheduler, starts = make_runner(clock, batch_seconds=600)

        runner.run(max_batches=2)

        assert starts[1] - starts[0] >= DAY
        assert starts[1] == DAY
        assert all(s <= runner.poll_seconds for s in clock.sleeps)

    def test_overrunning_batch_skips_missed_slot(self):
        clock = FakeClock()
        runner, scheduler, starts = make_runner(clock, batch_seconds=DAY + 3600)

        runner.run(max_batches=2)

        assert starts == [0.0, 2 * DAY]
        assert runner.slots_skipped == 1

    def test_stop_ends_loop(self):
        clock = FakeClock()
        holder = {}
        runner, scheduler, starts = make_runner(clock, on_batch=lambda: holder["runner"].stop())
        holder["runner"] = runner

        runner.run()

        assert starts == [0.0]
        assert runner.running is False


class TestRun:
    """Test the outermost run boundary."""

    def test_manual_runs_count(self):
        scheduler = MagicMock()

        assert run(scheduler, RunMode(MANUAL, 4)) is True
        scheduler.run_cycles.assert_called_once_with(4)

    def test_daily_uses_runner(self):
        scheduler = MagicMock()
        runner = MagicMock(cycles_per_batch=3, interval_seconds=DAY)

        assert run(scheduler, RunMode(DAILY), runner) is True
        runner.run.assert_called_once_with()
        scheduler.run_cycles.assert_not_called()

    def test_unexpected_error_is_contained(self):
        scheduler = MagicMock()
        scheduler.run_cycles.side_effect = RuntimeError("misconfigured")

        assert run(scheduler, RunMode(MANUAL, 2)) is False


class TestDailyBoundaries:
    """Test batches that end on or past a trigger time."""

    def test_batch_ending_on_trigger_runs_next_slot(self):
        clock = FakeClock()
        runner, scheduler, starts = make_runner(clock, batch_seconds=DAY)

        runner.run(max_batches=2)

        assert starts == [0.0, DAY]
        assert runner.slots_skipped == 0

    def test_long_overrun_skips_every_passed_slot(self):
        clock = FakeClock()
        runner, scheduler, starts = make_runner(clock, batch_seconds=2 * DAY + 1)

        runner.run(max_batches=2)

        assert starts == [0.0, 3 * DAY]
        assert runner.slots_skipped == 2

    def test_final_batch_adds_no_skips(self):
        clock = FakeClock()
        runner, scheduler, starts = make_runner(clock, batch_seconds=5 * DAY)

        runner.run(max_batches=1)

        assert starts == [0.0]
        assert runner.slots_skipped == 0
