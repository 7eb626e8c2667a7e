"""
Run modes for AutoSwap.

Manual mode runs a fixed number of cycles and returns. Daily mode runs a
batch of cycles right away and again every interval until stopped.
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from autoswap.core.utils import format_duration
from autoswap.trading.scheduler import CycleReport, CycleScheduler

logger = logging.getLogger(__name__)

MANUAL = "manual"
DAILY = "daily"


@dataclass(frozen=True)
class RunMode:
    """Resolved run mode handed to the scheduler."""
    mode: str
    cycle_count: int = 0

    def __post_init__(self):
        if self.mode not in (MANUAL, DAILY):
            raise ValueError(f"Unknown run mode: {self.mode}")
        if self.mode == MANUAL and self.cycle_count <= 0:
            raise ValueError("Cycle count must be greater than 0")

    @property
    def is_daily(self) -> bool:
        return self.mode == DAILY

    @classmethod
    def resolve(cls, cycles: Optional[int] = None, daily: bool = False) -> Optional["RunMode"]:
        """
        Resolve command-line options.

        The daily flag wins over an explicit cycle count. Returns None when
        neither is given and the user has to be asked.
        """
        if daily:
            return cls(DAILY)
        if cycles:
            return cls(MANUAL, cycles)
        return None


class DailyRunner:
    """
    Repeats a batch of cycles on a fixed cadence.

    Trigger times are anchored to the start: start, start + interval, ...
    If a batch runs past one or more trigger times, those slots are
    skipped rather than queued.
    """

    def __init__(
        self,
        scheduler: CycleScheduler,
        cycles_per_batch: int = 3,
        interval_seconds: float = 24 * 3600,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        poll_seconds: float = 60.0,
    ):
        """
        Initialize the daily runner.

        Args:
            scheduler: Runs the cycles of each batch
            cycles_per_batch: Cycles per trigger
            interval_seconds: Time between triggers
            clock: Monotonic clock in seconds, injectable for tests
            sleep: Blocking sleep, injectable for tests
            poll_seconds: Longest single sleep, bounds stop() latency
        """
        self.scheduler = scheduler
        self.cycles_per_batch = cycles_per_batch
        self.interval_seconds = interval_seconds
        self.clock = clock
        self.sleep = sleep
        self.poll_seconds = poll_seconds
        self.running = False
        self.batches_run = 0
        self.slots_skipped = 0

    def run(self, max_batches: Optional[int] = None) -> List[List[CycleReport]]:
        """
        Run batches until stop() is called or max_batches is reached.

        Returns:
            Cycle reports, one list per batch
        """
        self.running = True
        results = []
        next_trigger = self.clock()

        while self.running:
            now = self.clock()
            if now < next_trigger:
                self.sleep(min(next_trigger - now, self.poll_seconds))
                continue

            self.batches_run += 1
            logger.info(f"Daily batch #{self.batches_run}: {self.cycles_per_batch} cycles")
            results.append(self.scheduler.run_cycles(self.cycles_per_batch))

            if max_batches is not None and self.batches_run >= max_batches:
                break

            # Only slots strictly before now overlapped the batch
            next_trigger += self.interval_seconds
            now = self.clock()
            if now > next_trigger:
                missed = math.ceil((now - next_trigger) / self.interval_seconds)
                self.slots_skipped += missed
                next_trigger += missed * self.interval_seconds
                logger.warning(f"Batch overran the interval, skipped {missed} trigger(s)")

            logger.info(f"Next daily batch in {format_duration(next_trigger - self.clock())}")

        self.running = False
        return results

    def stop(self):
        """Stop after the current sleep slice or batch."""
        self.running = False


def run(scheduler: CycleScheduler, run_mode: RunMode, daily_runner: Optional[DailyRunner] = None) -> bool:
    """
    Execute a run mode. Outermost error boundary.

    Args:
        scheduler: Cycle scheduler
        run_mode: Resolved mode and cycle count
        daily_runner: Runner for daily mode (built from defaults if omitted)

    Returns:
        True if the run completed (or was stopped), False on unexpected error
    """
    try:
        if run_mode.is_daily:
            runner = daily_runner or DailyRunner(scheduler)
            logger.info(
                f"Daily mode: {runner.cycles_per_batch} cycles every "
                f"{format_duration(runner.interval_seconds)}"
            )
            runner.run()
        else:
            logger.info(f"Manual mode: {run_mode.cycle_count} cycle(s)")
            scheduler.run_cycles(run_mode.cycle_count)
            logger.info("AutoSwap finished")
        return True

    except Exception as e:
        logger.error(f"Run aborted: {e}", exc_info=True)
        return False
