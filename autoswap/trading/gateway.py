"""
Ledger gateway for AutoSwap trading.

Thin web3 wrapper: reads balances, allowances and fee data, encodes router
and ERC-20 calls, signs, submits and waits for receipts. Every web3 failure
is translated into an AutoSwap error type.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from eth_account import Account
from web3 import Web3
from web3.exceptions import TimeExhausted

from autoswap.core.errors import GasEstimationFailure, LedgerQueryError, TransactionError

logger = logging.getLogger(__name__)

MAX_UINT256 = 2 ** 256 - 1

ERC20_ABI = [
    {"constant": False, "inputs": [{"name": "spender", "type": "address"}, {"name": "amount", "type": "uint256"}], "name": "approve", "outputs": [{"name": "", "type": "bool"}], "stateMutability": "nonpayable", "type": "function"},
    {"constant": True, "inputs": [{"name": "owner", "type": "address"}, {"name": "spender", "type": "address"}], "name": "allowance", "outputs": [{"name": "", "type": "uint256"}], "stateMutability": "view", "type": "function"},
    {"constant": True, "inputs": [], "name": "decimals", "outputs": [{"name": "", "type": "uint8"}], "stateMutability": "view", "type": "function"},
    {"constant": True, "inputs": [{"name": "account", "type": "address"}], "name": "balanceOf", "outputs": [{"name": "", "type": "uint256"}], "stateMutability": "view", "type": "function"},
]

ROUTER_ABI = [
    {
        "inputs": [
            {
                "components": [
                    {"internalType": "address", "name": "tokenIn", "type": "address"},
                    {"internalType": "address", "name": "tokenOut", "type": "address"},
                    {"internalType": "uint24", "name": "fee", "type": "uint24"},
                    {"internalType": "address", "name": "recipient", "type": "address"},
                    {"internalType": "uint256", "name": "deadline", "type": "uint256"},
                    {"internalType": "uint256", "name": "amountIn", "type": "uint256"},
                    {"internalType": "uint256", "name": "amountOutMinimum", "type": "uint256"},
                    {"internalType": "uint160", "name": "sqrtPriceLimitX96", "type": "uint160"},
                ],
                "internalType": "struct ISwapRouter.ExactInputSingleParams",
                "name": "params",
                "type": "tuple",
            }
        ],
        "name": "exactInputSingle",
        "outputs": [{"internalType": "uint256", "name": "amountOut", "type": "uint256"}],
        "stateMutability": "payable",
        "type": "function",
    }
]


@dataclass
class TxReceipt:
    """Confirmed transaction."""
    tx_hash: str
    status: int
    block_number: Optional[int] = None
    gas_used: Optional[int] = None


class LedgerGateway:
    """
    Signs and submits transactions for a single wallet.

    Nonce is never cached: every submission reads the pending count first.
    """

    def __init__(
        self,
        rpc_url: str,
        private_key: str,
        chain_id: int,
        receipt_timeout: int = 120,
        rpc_timeout: int = 30,
    ):
        """
        Initialize the gateway.

        Args:
            rpc_url: EVM JSON-RPC endpoint
            private_key: Hex private key of the trading wallet
            chain_id: Chain ID used when signing
            receipt_timeout: Seconds to wait for a receipt
            rpc_timeout: HTTP timeout for RPC requests
        """
        if not private_key:
            raise ValueError("PRIVATE_KEY is required")

        self.w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": rpc_timeout}))
        self._account = Account.from_key(private_key)
        self.chain_id = chain_id
        self.receipt_timeout = receipt_timeout
        self._contracts: Dict[str, Any] = {}

    @property
    def address(self) -> str:
        return self._account.address

    def __repr__(self) -> str:
        return f"LedgerGateway(address={self.address}, chain_id={self.chain_id})"

    def is_connected(self) -> bool:
        try:
            return self.w3.is_connected()
        except Exception as e:
            logger.error(f"RPC connection check failed: {e}")
            return False

    def _erc20(self, token_address: str):
        address = Web3.to_checksum_address(token_address)
        if address not in self._contracts:
            self._contracts[address] = self.w3.eth.contract(address=address, abi=ERC20_ABI)
        return self._contracts[address]

    def _router(self, router_address: str):
        address = Web3.to_checksum_address(router_address)
        if address not in self._contracts:
            self._contracts[address] = self.w3.eth.contract(address=address, abi=ROUTER_ABI)
        return self._contracts[address]

    # Reads

    def get_nonce(self) -> int:
        """Pending transaction count of the wallet."""
        try:
            return self.w3.eth.get_transaction_count(self.address, "pending")
        except Exception as e:
            raise LedgerQueryError(f"Failed to read nonce: {e}") from e

    def get_gas_price(self) -> int:
        try:
            return self.w3.eth.gas_price
        except Exception as e:
            raise LedgerQueryError(f"Failed to read gas price: {e}") from e

    def estimate_gas(self, tx: Dict[str, Any]) -> int:
        try:
            return self.w3.eth.estimate_gas(tx)
        except Exception as e:
            raise GasEstimationFailure(str(e)) from e

    def balance_of(self, token_address: str) -> int:
        try:
            return self._erc20(token_address).functions.balanceOf(self.address).call()
        except Exception as e:
            raise LedgerQueryError(f"Failed to read balance of {token_address}: {e}") from e

    def allowance(self, token_address: str, spender: str) -> int:
        try:
            return self._erc20(token_address).functions.allowance(
                self.address, Web3.to_checksum_address(spender)
            ).call()
        except Exception as e:
            raise LedgerQueryError(f"Failed to read allowance of {token_address}: {e}") from e

    def decimals(self, token_address: str) -> int:
        try:
            return self._erc20(token_address).functions.decimals().call()
        except Exception as e:
            raise LedgerQueryError(f"Failed to read decimals of {token_address}: {e}") from e

    # Encoded calls

    def build_swap_call(self, router_address: str, params) -> Dict[str, Any]:
        """
        Encode an exactInputSingle call.

        Args:
            router_address: Swap router
            params: SwapParams (anything with as_tuple())

        Returns:
            Unsigned transaction dict without nonce, gas or gas price
        """
        token_in, token_out, fee, recipient, *rest = params.as_tuple()
        struct = (
            Web3.to_checksum_address(token_in),
            Web3.to_checksum_address(token_out),
            fee,
            Web3.to_checksum_address(recipient),
            *rest,
        )
        data = self._router(router_address).encode_abi("exactInputSingle", args=[struct])
        return {
            "from": self.address,
            "to": Web3.to_checksum_address(router_address),
            "data": data,
            "value": 0,
            "chainId": self.chain_id,
        }

    def build_approve_call(self, token_address: str, spender: str, amount: int = MAX_UINT256) -> Dict[str, Any]:
        """Encode an ERC-20 approve call (unsigned, no nonce or gas)."""
        data = self._erc20(token_address).encode_abi(
            "approve", args=[Web3.to_checksum_address(spender), amount]
        )
        return {
            "from": self.address,
            "to": Web3.to_checksum_address(token_address),
            "data": data,
            "value": 0,
            "chainId": self.chain_id,
        }

    # Submission

    def send_transaction(self, tx: Dict[str, Any]) -> TxReceipt:
        """
        Sign, submit and wait for a transaction.

        Args:
            tx: Complete transaction dict (nonce, gas, gasPrice set)

        Returns:
            TxReceipt of the confirmed transaction

        Raises:
            TransactionError: On submission error, revert or receipt timeout
        """
        try:
            signed = self._account.sign_transaction(tx)
            tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        except Exception as e:
            raise TransactionError(f"Submission failed: {e}") from e

        tx_hex = Web3.to_hex(tx_hash)
        logger.info(f"Transaction sent: {tx_hex}")

        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)
        except TimeExhausted as e:
            raise TransactionError(f"Confirmation timeout after {self.receipt_timeout}s", tx_hex) from e
        except Exception as e:
            raise TransactionError(f"Confirmation error: {e}", tx_hex) from e

        if receipt.get("status") != 1:
            raise TransactionError(f"Transaction reverted (status={receipt.get('status')})", tx_hex)

        logger.info(f"Transaction confirmed: {tx_hex}")
        return TxReceipt(
            tx_hash=tx_hex,
            status=receipt.get("status"),
            block_number=receipt.get("blockNumber"),
            gas_used=receipt.get("gasUsed"),
        )
