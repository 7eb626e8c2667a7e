"""
Router approvals for AutoSwap.

Grants the router an unlimited allowance once; later calls are read-only.
"""

import logging

from autoswap.core.catalog import Token
from autoswap.core.config import Config
from autoswap.core.errors import (
    ApprovalFailure,
    GasEstimationFailure,
    LedgerQueryError,
    TransactionError,
)
from autoswap.core.utils import to_base_units
from autoswap.trading.gateway import MAX_UINT256
from autoswap.trading.oracle import BalanceOracle

logger = logging.getLogger(__name__)


class ApprovalManager:
    """
    Ensures each token's allowance toward the router is large enough.

    Allowance is re-read on every call, never cached.
    """

    def __init__(self, gateway, oracle: BalanceOracle, config: Config):
        self.gateway = gateway
        self.oracle = oracle
        self.config = config

    def required_allowance(self, token: Token) -> int:
        """
        Allowance above which no approval is sent, in smallest units.

        Uses the token's on-chain decimals. Raises LedgerQueryError.
        """
        return to_base_units(self.config.approval_threshold, self.gateway.decimals(token.address))

    def ensure_approved(self, token: Token) -> bool:
        """
        Approve the router for a token if the allowance is below threshold.

        Args:
            token: Token to check

        Returns:
            True if the allowance is sufficient or the approval confirmed
        """
        try:
            if self.oracle.get_allowance(token) >= self.required_allowance(token):
                logger.info(f"Allowance for {token.name} already sufficient")
                return True

            self._approve(token)
            return True

        except LedgerQueryError as e:
            logger.error(str(ApprovalFailure(token.name, str(e))))
            return False
        except ApprovalFailure as e:
            logger.error(str(e))
            return False

    def _approve(self, token: Token) -> None:
        """Submit approve(router, max) and wait for the receipt."""
        router = self.oracle.catalog.router_address

        tx = self.gateway.build_approve_call(token.address, router, MAX_UINT256)
        tx["gasPrice"] = self.gateway.get_gas_price()
        tx["nonce"] = self.gateway.get_nonce()

        try:
            tx["gas"] = self.gateway.estimate_gas(tx)
        except GasEstimationFailure as e:
            logger.warning(f"Gas estimation failed for {token.name} approval, using fallback: {e}")
            tx["gas"] = self.config.fallback_gas_limit

        logger.info(f"Approving {token.name} for router {router}...")
        try:
            receipt = self.gateway.send_transaction(tx)
        except TransactionError as e:
            raise ApprovalFailure(token.name, str(e)) from e

        logger.info(f"Approve {token.name} confirmed (tx: {receipt.tx_hash})")
