"""
Token recovery for AutoSwap trading.

When a swap is short on its input token, tries to buy that token through
another allow-listed pair before the swap is given up.
"""

import logging
import random
from typing import Optional

from autoswap.core.catalog import Token
from autoswap.core.config import Config
from autoswap.core.errors import LedgerQueryError
from autoswap.core.utils import format_amount
from autoswap.trading.oracle import BalanceOracle

logger = logging.getLogger(__name__)


class RecoveryResolver:
    """
    Finds an alternate pair producing a short token and swaps through it.

    Recovery is one level deep: swaps started here never recover again.
    """

    def __init__(
        self,
        executor,
        oracle: BalanceOracle,
        config: Config,
        rng: Optional[random.Random] = None,
    ):
        self.executor = executor
        self.oracle = oracle
        self.catalog = oracle.catalog
        self.config = config
        self.rng = rng or random.Random()

    def recover(self, target: Token, max_retries: int = 5) -> bool:
        """
        Acquire some of the target token via any pair that outputs it.

        Args:
            target: Token that is short
            max_retries: Attempt budget for each recovery swap

        Returns:
            True on the first recovery swap that confirms
        """
        if not self.config.enable_token_recovery:
            logger.info(f"Token recovery for {target.name} is disabled")
            return False

        candidates = self.catalog.pairs_producing(target.address)
        # No preference among recovery routes
        candidates = self.rng.sample(candidates, len(candidates))
        logger.info(f"Trying to recover {target.name} via {len(candidates)} pair(s)")

        for pair in candidates:
            source = self.catalog.get_token(pair.token_in)

            try:
                balance = self.oracle.get_balance(source)
            except LedgerQueryError as e:
                logger.warning(f"Cannot read {source.name} balance for recovery: {e}")
                continue

            amount = self.oracle.random_swap_amount(source)
            if balance < amount:
                logger.warning(
                    f"{source.name} balance too low for recovery "
                    f"({format_amount(balance, source)} < {format_amount(amount, source)})"
                )
                continue

            logger.info(f"Recovering {target.name} with swap {pair.label}")
            if self.executor.swap(pair, max_retries, allow_recovery=False):
                logger.info(f"Recovered {target.name} via {pair.label}")
                return True

        logger.warning(f"Could not recover {target.name}")
        return False
