"""
Swap executor for AutoSwap trading.

Runs one trading pair through an explicit, bounded state machine:

    CHECK_BALANCE -> BUILD_PARAMS -> ESTIMATE_GAS -> SUBMIT -> CONFIRMED
         |                                             |
         v                                             v
    INSUFFICIENT_BALANCE -> recovery -> CHECK_BALANCE  FAILED -> CHECK_BALANCE
         |                                             |    (next attempt)
         v                                             v
      ABORTED                                      EXHAUSTED

A successful recovery re-checks the balance without consuming an attempt.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from autoswap.core.catalog import TradingPair
from autoswap.core.config import Config
from autoswap.core.errors import (
    GasEstimationFailure,
    LedgerQueryError,
    SwapSubmissionFailure,
    TransactionError,
)
from autoswap.core.utils import format_amount
from autoswap.trading.oracle import BalanceOracle

logger = logging.getLogger(__name__)

# Router fee tiers, hundredths of a basis point
STABLE_FEE_TIER = 100  # 0.01%
DEFAULT_FEE_TIER = 500  # 0.05%


class SwapState(str, Enum):
    """States of a single swap attempt."""
    CHECK_BALANCE = "check_balance"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    BUILD_PARAMS = "build_params"
    ESTIMATE_GAS = "estimate_gas"
    SUBMIT = "submit"
    FAILED = "failed"
    CONFIRMED = "confirmed"
    ABORTED = "aborted"
    EXHAUSTED = "exhausted"


TERMINAL_STATES = {SwapState.CONFIRMED, SwapState.ABORTED, SwapState.EXHAUSTED}


@dataclass
class SwapParams:
    """Arguments of the router's exactInputSingle call."""
    token_in: str
    token_out: str
    fee: int
    recipient: str
    deadline: int
    amount_in: int
    # No slippage protection
    amount_out_minimum: int = 0
    sqrt_price_limit_x96: int = 0

    def as_tuple(self) -> tuple:
        return (
            self.token_in,
            self.token_out,
            self.fee,
            self.recipient,
            self.deadline,
            self.amount_in,
            self.amount_out_minimum,
            self.sqrt_price_limit_x96,
        )


@dataclass
class Attempt:
    """Per-call swap state. Lives only for one swap() call."""
    pair: TradingPair
    max_retries: int
    allow_recovery: bool = True
    number: int = 1
    waited: float = 0.0
    recoveries: int = 0
    balance: Optional[int] = None
    amount_in: Optional[int] = None
    params: Optional[SwapParams] = None
    tx: Optional[dict] = None
    tx_hash: Optional[str] = None
    error: Optional[Exception] = None
    history: List[SwapState] = field(default_factory=list)


class SwapExecutor:
    """
    Executes swaps with bounded retries and balance recovery.

    The recovery resolver is attached after construction because it
    calls back into the executor.
    """

    def __init__(
        self,
        gateway,
        oracle: BalanceOracle,
        config: Config,
        resolver=None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize swap executor.

        Args:
            gateway: LedgerGateway (or compatible)
            oracle: Balance reads and swap amount draws
            config: Retry, delay, deadline and gas settings
            resolver: RecoveryResolver used on insufficient balance
            sleep: Blocking sleep, injectable for tests
            clock: Wall clock in seconds, used for deadlines
        """
        self.gateway = gateway
        self.oracle = oracle
        self.catalog = oracle.catalog
        self.config = config
        self.resolver = resolver
        self.sleep = sleep
        self.clock = clock

        self._handlers = {
            SwapState.CHECK_BALANCE: self._check_balance,
            SwapState.INSUFFICIENT_BALANCE: self._handle_insufficient,
            SwapState.BUILD_PARAMS: self._build_params,
            SwapState.ESTIMATE_GAS: self._estimate_gas,
            SwapState.SUBMIT: self._submit,
            SwapState.FAILED: self._handle_failure,
        }

    def swap(self, pair: TradingPair, max_retries: Optional[int] = None, allow_recovery: bool = True) -> bool:
        """
        Swap a random amount of pair.token_in into pair.token_out.

        Args:
            pair: Trading pair to execute
            max_retries: Attempt budget (default from config)
            allow_recovery: False for swaps started by the recovery resolver

        Returns:
            True if a swap confirmed
        """
        attempt = Attempt(
            pair=pair,
            max_retries=self.config.max_retries if max_retries is None else max_retries,
            allow_recovery=allow_recovery,
        )
        return self.run(attempt) is SwapState.CONFIRMED

    def run(self, attempt: Attempt) -> SwapState:
        """Drive an attempt to a terminal state and return it."""
        state = SwapState.CHECK_BALANCE
        while state not in TERMINAL_STATES:
            attempt.history.append(state)
            state = self._handlers[state](attempt)

        attempt.history.append(state)
        return state

    def _check_balance(self, attempt: Attempt) -> SwapState:
        pair = attempt.pair
        token = self.catalog.get_token(pair.token_in)
        logger.info(f"Attempt {attempt.number}/{attempt.max_retries} for swap {pair.label}")

        try:
            attempt.balance = self.oracle.get_balance(token)
        except LedgerQueryError as e:
            attempt.error = e
            return SwapState.FAILED

        # Fresh amount every time the balance is checked
        attempt.amount_in = self.oracle.random_swap_amount(token)

        if attempt.balance < attempt.amount_in:
            return SwapState.INSUFFICIENT_BALANCE
        return SwapState.BUILD_PARAMS

    def _handle_insufficient(self, attempt: Attempt) -> SwapState:
        pair = attempt.pair
        token = self.catalog.get_token(pair.token_in)
        logger.warning(
            f"Insufficient {pair.in_name}: {format_amount(attempt.balance, token)} available, "
            f"{format_amount(attempt.amount_in, token)} needed"
        )

        if not attempt.allow_recovery:
            logger.info(f"Skipping swap {pair.label} (no nested recovery)")
            return SwapState.ABORTED

        if not self.config.enable_token_recovery or self.resolver is None:
            logger.info(f"Token recovery disabled, skipping swap {pair.label}")
            return SwapState.ABORTED

        if attempt.recoveries >= attempt.max_retries:
            logger.warning(f"Recovery budget for {pair.label} used up, skipping")
            return SwapState.ABORTED

        if self.resolver.recover(token, attempt.max_retries):
            attempt.recoveries += 1
            logger.info(f"Retrying swap {pair.label} after recovery")
            return SwapState.CHECK_BALANCE

        logger.warning(f"Skipping swap {pair.label}")
        return SwapState.ABORTED

    def fee_tier(self, pair: TradingPair) -> int:
        """Low tier when selling the stable reference token."""
        if self.catalog.is_stable(pair.token_in):
            return STABLE_FEE_TIER
        return DEFAULT_FEE_TIER

    def _build_params(self, attempt: Attempt) -> SwapState:
        pair = attempt.pair
        attempt.params = SwapParams(
            token_in=pair.token_in,
            token_out=pair.token_out,
            fee=self.fee_tier(pair),
            recipient=self.gateway.address,
            deadline=int(self.clock()) + self.config.deadline_minutes * 60,
            amount_in=attempt.amount_in,
        )

        token = self.catalog.get_token(pair.token_in)
        logger.info(
            f"{format_amount(attempt.amount_in, token)} {pair.in_name} -> {pair.out_name} | "
            f"fee {attempt.params.fee / 10000}% | recipient {attempt.params.recipient}"
        )
        return SwapState.ESTIMATE_GAS

    def _estimate_gas(self, attempt: Attempt) -> SwapState:
        try:
            tx = self.gateway.build_swap_call(self.catalog.router_address, attempt.params)
            tx["gasPrice"] = self.gateway.get_gas_price()
            tx["nonce"] = self.gateway.get_nonce()
        except LedgerQueryError as e:
            attempt.error = e
            return SwapState.FAILED

        try:
            tx["gas"] = self.gateway.estimate_gas(tx)
        except GasEstimationFailure as e:
            logger.warning(f"Gas estimation failed, using fallback {self.config.fallback_gas_limit}: {e}")
            tx["gas"] = self.config.fallback_gas_limit

        attempt.tx = tx
        return SwapState.SUBMIT

    def _submit(self, attempt: Attempt) -> SwapState:
        pair = attempt.pair
        logger.info(f"Submitting swap {pair.label}...")

        try:
            receipt = self.gateway.send_transaction(attempt.tx)
        except TransactionError as e:
            attempt.error = SwapSubmissionFailure(pair.label, str(e), e.tx_hash)
            return SwapState.FAILED

        attempt.tx_hash = receipt.tx_hash
        logger.info(f"Swap {pair.label} confirmed (tx: {receipt.tx_hash})")
        return SwapState.CONFIRMED

    def _handle_failure(self, attempt: Attempt) -> SwapState:
        pair = attempt.pair
        logger.error(f"Attempt {attempt.number} for {pair.label} failed: {attempt.error}")

        if attempt.number >= attempt.max_retries:
            logger.error(f"Giving up on {pair.label} after {attempt.max_retries} attempts")
            return SwapState.EXHAUSTED

        logger.info(f"Waiting {self.config.retry_delay_seconds:.0f}s before retry...")
        self.sleep(self.config.retry_delay_seconds)
        attempt.waited += self.config.retry_delay_seconds
        attempt.number += 1
        attempt.error = None
        return SwapState.CHECK_BALANCE
