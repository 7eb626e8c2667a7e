"""
Shared fixtures: configs, small catalogs and a seeded random source.
"""

import random
import sys
from dataclasses import replace
from pathlib import Path

import pytest

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from autoswap.core.catalog import PairCatalog
from autoswap.core.config import Config

from tests.helpers import (
    PAIR_AB,
    PAIR_BA,
    PAIR_CB,
    ROUTER,
    SleepRecorder,
    TOKEN_A_INFO,
    TOKEN_B_INFO,
    TOKEN_C_INFO,
)


@pytest.fixture
def config():
    return Config(
        rpc_url="http://localhost:8545",
        chain_id=16600,
        private_key="0x" + "11" * 32,
        cycle_count=2,
        enable_token_recovery=True,
    )


@pytest.fixture
def config_no_recovery(config):
    return replace(config, enable_token_recovery=False)


@pytest.fixture
def catalog_ab():
    """A <-> B, with B as the stable token."""
    return PairCatalog(
        tokens=[TOKEN_A_INFO, TOKEN_B_INFO],
        pairs=[PAIR_AB, PAIR_BA],
        router_address=ROUTER,
        stable_token="BBB",
    )


@pytest.fixture
def catalog_abc():
    """A <-> B plus C -> B."""
    return PairCatalog(
        tokens=[TOKEN_A_INFO, TOKEN_B_INFO, TOKEN_C_INFO],
        pairs=[PAIR_AB, PAIR_BA, PAIR_CB],
        router_address=ROUTER,
        stable_token="BBB",
    )


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def sleeper():
    return SleepRecorder()
