"""
Balance and allowance reads for AutoSwap.
"""

import logging
import random
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from autoswap.core.catalog import PairCatalog, Token
from autoswap.core.utils import to_base_units

logger = logging.getLogger(__name__)


class BalanceOracle:
    """
    Read-only view of the wallet's token holdings.

    Nothing is cached: on-chain state may change between calls.
    """

    def __init__(self, gateway, catalog: PairCatalog, rng: Optional[random.Random] = None):
        """
        Initialize the oracle.

        Args:
            gateway: LedgerGateway (or compatible)
            catalog: Pair catalog holding the router address
            rng: Random source for swap amounts
        """
        self.gateway = gateway
        self.catalog = catalog
        self.rng = rng or random.Random()

    def get_balance(self, token: Token) -> int:
        """Wallet balance in smallest units. Raises LedgerQueryError."""
        return self.gateway.balance_of(token.address)

    def get_allowance(self, token: Token) -> int:
        """Allowance granted to the router, in smallest units. Raises LedgerQueryError."""
        return self.gateway.allowance(token.address, self.catalog.router_address)

    def random_swap_amount(self, token: Token) -> int:
        """
        Draw a swap size for a token.

        Uniform in the token's swap range, rounded to its display precision
        and kept inside the inclusive range.

        Returns:
            Amount in smallest units
        """
        low = Decimal(str(token.min_amount))
        high = Decimal(str(token.max_amount))
        quantum = Decimal(1).scaleb(-token.format_decimals)

        drawn = Decimal(repr(self.rng.uniform(token.min_amount, token.max_amount)))
        value = drawn.quantize(quantum, rounding=ROUND_HALF_UP)
        value = min(max(value, low), high)

        return to_base_units(value, token.decimals)
