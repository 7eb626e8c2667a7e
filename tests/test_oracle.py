"""
Unit tests for balance, allowance and swap amount reads.
"""

import random
import pytest
from decimal import Decimal
from unittest.mock import MagicMock
import sys
from pathlib import Path

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from autoswap.core.catalog import DEFAULT_CATALOG, USDT_TOKEN_ADDRESS, PairCatalog, Token
from autoswap.core.errors import LedgerQueryError
from autoswap.trading.oracle import BalanceOracle


class TestRandomSwapAmount:
    """Swap sizes stay in range at the token's precision."""

    @pytest.mark.parametrize("token", DEFAULT_CATALOG.tokens, ids=lambda t: t.name)
    def test_within_range_and_precision(self, token):
        oracle = BalanceOracle(MagicMock(), DEFAULT_CATALOG, random.Random(7))
        low = int(Decimal(str(token.min_amount)).scaleb(token.decimals))
        high = int(Decimal(str(token.max_amount)).scaleb(token.decimals))
        step = 10 ** (token.decimals - token.format_decimals)

        for _ in range(500):
            amount = oracle.random_swap_amount(token)
            assert low <= amount <= high
            assert amount % step == 0

    def test_draw_at_upper_bound_stays_inside(self):
        """A draw that rounds above max is clamped to max."""
        token = Token("0xabc", "ABC", 18, (1, 2), 2)
        catalog = PairCatalog(tokens=[token], pairs=[], router_address="0x1")
        rng = MagicMock()
        rng.uniform.return_value = 2.005

        amount = BalanceOracle(MagicMock(), catalog, rng).random_swap_amount(token)
        assert amount == 2 * 10 ** 18

    def test_rounds_to_display_precision(self):
        token = Token("0xabc", "ABC", 6, (60, 400), 2)
        catalog = PairCatalog(tokens=[token], pairs=[], router_address="0x1")
        rng = MagicMock()
        rng.uniform.return_value = 123.456789

        amount = BalanceOracle(MagicMock(), catalog, rng).random_swap_amount(token)
        assert amount == 123_460_000

    def test_draws_vary(self):
        oracle = BalanceOracle(MagicMock(), DEFAULT_CATALOG, random.Random(1))
        token = DEFAULT_CATALOG.get_token(USDT_TOKEN_ADDRESS)
        amounts = {oracle.random_swap_amount(token) for _ in range(50)}
        assert len(amounts) > 1


class TestLedgerReads:
    """Balance and allowance go straight to the gateway."""

    def test_get_balance(self):
        gateway = MagicMock()
        gateway.balance_of.return_value = 42
        token = DEFAULT_CATALOG.tokens[0]

        assert BalanceOracle(gateway, DEFAULT_CATALOG).get_balance(token) == 42
        gateway.balance_of.assert_called_once_with(token.address)

    def test_get_allowance_targets_router(self):
        gateway = MagicMock()
        gateway.allowance.return_value = 7
        token = DEFAULT_CATALOG.tokens[1]

        assert BalanceOracle(gateway, DEFAULT_CATALOG).get_allowance(token) == 7
        gateway.allowance.assert_called_once_with(token.address, DEFAULT_CATALOG.router_address)

    def test_read_errors_propagate(self):
        gateway = MagicMock()
        gateway.balance_of.side_effect = LedgerQueryError("rpc down")

        with pytest.raises(LedgerQueryError):
            BalanceOracle(gateway, DEFAULT_CATALOG).get_balance(DEFAULT_CATALOG.tokens[0])
