"""
Test helpers: an in-memory ledger gateway, a sleep recorder and small tokens.
"""

from autoswap.core.catalog import Token, TradingPair
from autoswap.core.errors import GasEstimationFailure, LedgerQueryError, TransactionError
from autoswap.trading.gateway import TxReceipt

WALLET = "0x1111111111111111111111111111111111111111"
ROUTER = "0x9999999999999999999999999999999999999999"
TOKEN_A = "0xAAaAaAaaAaAaAaaAaAAAAAAAAaaaAaAaAaaAaaAa"
TOKEN_B = "0xbBbBBBBbbBBBbbbBbbBbbbbBBbBbbbbBbBbbBBbB"
TOKEN_C = "0xCcCCccccCCCCcCCCCCCcCcCccCcCCCcCcccccccC"

WHOLE = 10 ** 18


class FakeGateway:
    """
    In-memory stand-in for LedgerGateway.

    Swaps move amount_in out of token_in and swap_output into token_out.
    """

    address = WALLET

    def __init__(self, balances=None, allowances=None, swap_output=1000 * WHOLE):
        self.balances = {k.lower(): v for k, v in (balances or {}).items()}
        self.allowances = {k.lower(): v for k, v in (allowances or {}).items()}
        self.swap_output = swap_output
        self.nonce = 0
        self.gas_price = 1_000_000_000
        self.gas_estimate = 150_000
        self.token_decimals = 18

        self.fail_submissions = 0  # next N submissions fail, -1 = always
        self.fail_gas_estimate = False
        self.fail_reads = False

        self.submitted = []
        self.swaps = []
        self.approvals = []
        self.balance_reads = []

    def get_nonce(self):
        if self.fail_reads:
            raise LedgerQueryError("nonce unavailable")
        return self.nonce

    def get_gas_price(self):
        if self.fail_reads:
            raise LedgerQueryError("gas price unavailable")
        return self.gas_price

    def estimate_gas(self, tx):
        if self.fail_gas_estimate:
            raise GasEstimationFailure("execution reverted")
        return self.gas_estimate

    def balance_of(self, token_address):
        self.balance_reads.append(token_address)
        if self.fail_reads:
            raise LedgerQueryError("balance unavailable")
        return self.balances.get(token_address.lower(), 0)

    def allowance(self, token_address, spender):
        if self.fail_reads:
            raise LedgerQueryError("allowance unavailable")
        return self.allowances.get(token_address.lower(), 0)

    def decimals(self, token_address):
        if self.fail_reads:
            raise LedgerQueryError("decimals unavailable")
        return self.token_decimals

    def build_swap_call(self, router_address, params):
        return {"from": WALLET, "to": router_address, "data": "0x414bf389", "kind": "swap", "params": params}

    def build_approve_call(self, token_address, spender, amount):
        return {"from": WALLET, "to": token_address, "data": "0x095ea7b3", "kind": "approve", "amount": amount}

    def send_transaction(self, tx):
        self.submitted.append(tx)

        if self.fail_submissions:
            if self.fail_submissions > 0:
                self.fail_submissions -= 1
            raise TransactionError("Transaction reverted (status=0)", "0xdead")

        self.nonce += 1
        if tx["kind"] == "approve":
            self.allowances[tx["to"].lower()] = tx["amount"]
            self.approvals.append(tx["to"])
        else:
            params = tx["params"]
            token_in = params.token_in.lower()
            token_out = params.token_out.lower()
            self.balances[token_in] = self.balances.get(token_in, 0) - params.amount_in
            self.balances[token_out] = self.balances.get(token_out, 0) + self.swap_output
            self.swaps.append((params.token_in, params.token_out))

        return TxReceipt(tx_hash=f"0x{len(self.submitted):064x}", status=1, block_number=1, gas_used=tx.get("gas"))


class SleepRecorder:
    """Records requested sleeps instead of sleeping."""

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)

    @property
    def total(self):
        return sum(self.calls)


TOKEN_A_INFO = Token(TOKEN_A, "AAA", 18, (1, 2), 2)
TOKEN_B_INFO = Token(TOKEN_B, "BBB", 18, (10, 20), 2)
TOKEN_C_INFO = Token(TOKEN_C, "CCC", 18, (5, 6), 2)

PAIR_AB = TradingPair(TOKEN_A, TOKEN_B, "AAA", "BBB")
PAIR_BA = TradingPair(TOKEN_B, TOKEN_A, "BBB", "AAA")
PAIR_CB = TradingPair(TOKEN_C, TOKEN_B, "CCC", "BBB")
