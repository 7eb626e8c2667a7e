"""
Token and trading pair catalog.

Static registry of the tokens AutoSwap trades and the allow-listed
(token_in, token_out) directions. A pair and its reverse are separate
entries; the allow-list may omit a reverse direction.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from autoswap.core.errors import UnknownToken

# 0G testnet deployment
BTC_TOKEN_ADDRESS = "0x36f6414FF1df609214dDAbA71c84f18bcf00F67d"
ETH_TOKEN_ADDRESS = "0x0fE9B43625fA7EdD663aDcEC0728DD635e4AbF7c"
USDT_TOKEN_ADDRESS = "0x3ec8a8705be1d5ca90066b37ba62c4183b024ebf"
ROUTER_ADDRESS = "0xb95B5953FF8ee5D5d9818CdbEfE363ff2191318c"


@dataclass(frozen=True)
class Token:
    """A tradable ERC-20 token."""
    address: str
    name: str
    decimals: int
    swap_range: Tuple[float, float]  # human units, inclusive
    format_decimals: int  # display precision, also the draw precision

    @property
    def min_amount(self) -> float:
        return self.swap_range[0]

    @property
    def max_amount(self) -> float:
        return self.swap_range[1]


@dataclass(frozen=True)
class TradingPair:
    """An allow-listed swap direction."""
    token_in: str
    token_out: str
    in_name: str
    out_name: str

    @property
    def label(self) -> str:
        return f"{self.in_name} -> {self.out_name}"

    def __str__(self) -> str:
        return self.label


class PairCatalog:
    """
    Immutable registry of tokens, pairs and the router they trade through.

    Constructed once at startup and passed explicitly to every component.
    """

    def __init__(
        self,
        tokens: List[Token],
        pairs: List[TradingPair],
        router_address: str,
        stable_token: Optional[str] = None,
    ):
        """
        Initialize the catalog.

        Args:
            tokens: Tokens known to the bot
            pairs: Allowed swap directions, by token address
            router_address: Swap router every approval and swap targets
            stable_token: Name of the stable reference token (low fee tier)
        """
        self._tokens = tuple(tokens)
        self._pairs = tuple(pairs)
        self.router_address = router_address
        self.stable_token = stable_token
        self._by_address = {t.address.lower(): t for t in self._tokens}

        for pair in self._pairs:
            for address in (pair.token_in, pair.token_out):
                if address.lower() not in self._by_address:
                    raise UnknownToken(address)

    @property
    def tokens(self) -> Tuple[Token, ...]:
        return self._tokens

    @property
    def pairs(self) -> Tuple[TradingPair, ...]:
        return self._pairs

    def get_token(self, address: str) -> Token:
        """Look up a token by address (case-insensitive)."""
        token = self._by_address.get(address.lower())
        if token is None:
            raise UnknownToken(address)
        return token

    def pairs_producing(self, address: str) -> List[TradingPair]:
        """All pairs whose output is the given token, in catalog order."""
        address = address.lower()
        return [p for p in self._pairs if p.token_out.lower() == address]

    def is_stable(self, address: str) -> bool:
        """True if the token is the stable reference token."""
        if not self.stable_token:
            return False
        return self.get_token(address).name == self.stable_token

    def __len__(self) -> int:
        return len(self._pairs)


DEFAULT_TOKENS = [
    Token(BTC_TOKEN_ADDRESS, "BTC", 18, (0.001, 0.015), 6),
    Token(ETH_TOKEN_ADDRESS, "ETH", 18, (0.01, 0.1), 4),
    Token(USDT_TOKEN_ADDRESS, "USDT", 18, (60, 400), 2),
]

DEFAULT_PAIRS = [
    TradingPair(BTC_TOKEN_ADDRESS, USDT_TOKEN_ADDRESS, "BTC", "USDT"),
    TradingPair(BTC_TOKEN_ADDRESS, ETH_TOKEN_ADDRESS, "BTC", "ETH"),
    TradingPair(USDT_TOKEN_ADDRESS, ETH_TOKEN_ADDRESS, "USDT", "ETH"),
    TradingPair(USDT_TOKEN_ADDRESS, BTC_TOKEN_ADDRESS, "USDT", "BTC"),
    TradingPair(ETH_TOKEN_ADDRESS, USDT_TOKEN_ADDRESS, "ETH", "USDT"),
]

DEFAULT_CATALOG = PairCatalog(
    tokens=DEFAULT_TOKENS,
    pairs=DEFAULT_PAIRS,
    router_address=ROUTER_ADDRESS,
    stable_token="USDT",
)
