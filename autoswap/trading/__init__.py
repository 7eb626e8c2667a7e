"""
Trading automation module for AutoSwap.

Handles the ledger gateway, approvals, swaps, recovery and cycle scheduling.
"""

from autoswap.trading.gateway import LedgerGateway
from autoswap.trading.oracle import BalanceOracle
from autoswap.trading.approvals import ApprovalManager
from autoswap.trading.executor import SwapExecutor
from autoswap.trading.recovery import RecoveryResolver
from autoswap.trading.scheduler import CycleScheduler
from autoswap.trading.runner import DailyRunner, RunMode

__all__ = [
    "LedgerGateway",
    "BalanceOracle",
    "ApprovalManager",
    "SwapExecutor",
    "RecoveryResolver",
    "CycleScheduler",
    "DailyRunner",
    "RunMode",
]
