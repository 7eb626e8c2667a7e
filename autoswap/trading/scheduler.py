"""
Cycle scheduler for AutoSwap trading.

One cycle = approve every token, then swap every allow-listed pair
exactly once in random order.
"""

import logging
import random
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

from autoswap.core.catalog import DEFAULT_CATALOG, PairCatalog, TradingPair
from autoswap.core.config import Config
from autoswap.trading.approvals import ApprovalManager
from autoswap.trading.executor import SwapExecutor
from autoswap.trading.oracle import BalanceOracle
from autoswap.trading.recovery import RecoveryResolver

logger = logging.getLogger(__name__)


@dataclass
class CycleReport:
    """Outcome of one cycle."""
    index: int
    total: int
    approvals: Dict[str, bool] = field(default_factory=dict)
    attempted: List[TradingPair] = field(default_factory=list)
    succeeded: List[TradingPair] = field(default_factory=list)
    failed: List[TradingPair] = field(default_factory=list)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @property
    def summary(self) -> str:
        return (
            f"Cycle {self.index}/{self.total}: "
            f"{len(self.succeeded)} ok, {len(self.failed)} failed "
            f"of {len(self.attempted)} pairs"
        )


class CycleScheduler:
    """
    Sequences approvals and swaps, one cycle at a time.

    Strictly sequential: the next swap never starts before the previous
    one returns.
    """

    def __init__(
        self,
        catalog: PairCatalog,
        approvals: ApprovalManager,
        executor: SwapExecutor,
        config: Config,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.catalog = catalog
        self.approvals = approvals
        self.executor = executor
        self.config = config
        self.rng = rng or random.Random()
        self.sleep = sleep

    @classmethod
    def from_config(
        cls,
        config: Config,
        gateway,
        catalog: PairCatalog = DEFAULT_CATALOG,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ) -> "CycleScheduler":
        """Wire oracle, approvals, executor and recovery for a gateway."""
        rng = rng or random.Random()
        oracle = BalanceOracle(gateway, catalog, rng)
        approvals = ApprovalManager(gateway, oracle, config)
        executor = SwapExecutor(gateway, oracle, config, sleep=sleep, clock=clock)
        executor.resolver = RecoveryResolver(executor, oracle, config, rng)
        return cls(catalog, approvals, executor, config, rng=rng, sleep=sleep)

    def run_cycle(self, index: int, total: int) -> CycleReport:
        """
        Run one full cycle.

        Args:
            index: 1-based cycle number
            total: Number of cycles in this run

        Returns:
            CycleReport with every pair attempted exactly once
        """
        report = CycleReport(index=index, total=total, started_at=datetime.now())
        logger.info(f"Cycle {index} of {total}")

        logger.info("Approving tokens")
        for token in self.catalog.tokens:
            approved = self.approvals.ensure_approved(token)
            report.approvals[token.name] = approved
            if not approved:
                logger.warning(f"Continuing although approval of {token.name} failed")

        logger.info("Swapping pairs")
        order = self.rng.sample(list(self.catalog.pairs), len(self.catalog.pairs))

        for pair in order:
            report.attempted.append(pair)

            if self.executor.swap(pair, self.config.max_retries):
                report.succeeded.append(pair)
                logger.info(f"Pausing {self.config.swap_pause_seconds:.0f}s before next swap...")
                self.sleep(self.config.swap_pause_seconds)
            else:
                report.failed.append(pair)

        report.finished_at = datetime.now()
        logger.info(report.summary)
        return report

    def run_cycles(self, count: int) -> List[CycleReport]:
        """Run cycles 1..count back to back."""
        return [self.run_cycle(index, count) for index in range(1, count + 1)]
