"""
Wallet providers - The signing side of a wallet session.

LocalKeyProvider signs with an eth-account key and broadcasts through the
JSON-RPC client.  Gas is paid by the key's address.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from eth_account.signers.local import LocalAccount
from eth_hash.auto import keccak

from ..chain.rpc import RpcClient
from .keys import get_account

logger = logging.getLogger(__name__)


class WalletProvider(Protocol):
    async def request_accounts(self) -> list[str]:
        ...

    async def chain_id(self) -> int:
        ...

    async def send_transaction(self, tx: dict[str, Any]) -> str:
        ...

    async def wait_for_receipt(self, tx_hash: str, timeout: float) -> dict:
        ...


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format.

    eth-account requires checksummed addresses in transaction fields.
    """
    addr = address.lower().replace("0x", "")
    addr_hash = keccak(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


class LocalKeyProvider:
    """
    Wallet provider backed by a local private key.

    Args:
        rpc: JSON-RPC client for the target chain
        private_key: 0x-prefixed hex private key; loaded from the
                     environment on first use when omitted
        gas_limit: Gas limit applied to every transaction
    """

    def __init__(
        self,
        rpc: RpcClient,
        private_key: Optional[str] = None,
        gas_limit: int = 100_000,
    ) -> None:
        self.rpc = rpc
        self._private_key = private_key
        self._account: Optional[LocalAccount] = None
        self.gas_limit = gas_limit

    def _get_account(self) -> LocalAccount:
        if self._account is None:
            self._account = get_account(self._private_key)
        return self._account

    async def request_accounts(self) -> list[str]:
        return [self._get_account().address]

    async def chain_id(self) -> int:
        return await self.rpc.chain_id()

    async def send_transaction(self, tx: dict[str, Any]) -> str:
        """
        Fill in nonce, gas and chain id, sign, and broadcast.

        Args:
            tx: Partial transaction with "to", "data" and optionally "value"

        Returns:
            Transaction hash (0x-prefixed hex)
        """
        account = self._get_account()
        full_tx = {
            "to": to_checksum_address(tx["to"]),
            "data": tx["data"],
            "value": tx.get("value", 0),
            "nonce": await self.rpc.get_nonce(account.address),
            "gas": tx.get("gas") or self.gas_limit,
            "gasPrice": await self.rpc.get_gas_price(),
            "chainId": tx.get("chainId") or await self.rpc.chain_id(),
        }

        signed = account.sign_transaction(full_tx)
        raw_tx = "0x" + signed.raw_transaction.hex()
        tx_hash = await self.rpc.send_raw_transaction(raw_tx)
        logger.info("Broadcast transaction %s from %s", tx_hash, account.address)
        return tx_hash

    async def wait_for_receipt(self, tx_hash: str, timeout: float) -> dict:
        return await self.rpc.wait_for_receipt(tx_hash, timeout=timeout)
