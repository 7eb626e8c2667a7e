"""
Error types for AutoSwap.

Low-level web3 failures are translated into these at the gateway boundary.
"""


class AutoSwapError(Exception):
    """Base class for all AutoSwap errors."""


class UnknownToken(AutoSwapError):
    """Address or name is not in the pair catalog."""

    def __init__(self, key: str):
        super().__init__(f"Unknown token: {key}")
        self.key = key


class LedgerQueryError(AutoSwapError):
    """A read against the ledger (balance, allowance, nonce, gas price) failed."""


class GasEstimationFailure(AutoSwapError):
    """Gas estimation was rejected by the node."""


class TransactionError(AutoSwapError):
    """A transaction could not be submitted, reverted, or timed out."""

    def __init__(self, message: str, tx_hash: str = None):
        super().__init__(message)
        self.tx_hash = tx_hash


class ApprovalFailure(AutoSwapError):
    """Approval of a token toward the router did not complete."""

    def __init__(self, token_name: str, reason: str):
        super().__init__(f"Approval of {token_name} failed: {reason}")
        self.token_name = token_name
        self.reason = reason


class SwapSubmissionFailure(AutoSwapError):
    """Swap was rejected on submission, reverted on-chain, or timed out."""

    def __init__(self, pair_label: str, reason: str, tx_hash: str = None):
        super().__init__(f"Swap {pair_label} failed: {reason}")
        self.pair_label = pair_label
        self.reason = reason
        self.tx_hash = tx_hash
