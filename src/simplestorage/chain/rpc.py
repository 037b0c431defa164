"""
JSON-RPC Client for Avalanche C-Chain.

Lightweight alternative to web3.py: uses httpx for HTTP + eth-abi for encoding.
Supports read-only contract calls, chain id and nonce queries, raw
transaction submission and receipt polling.  All calls are async so the
caller never blocks on the network.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import time
from typing import Any, Optional

import httpx

from ..errors import RpcError
from .abi import decode_result, encode_call

logger = logging.getLogger(__name__)


class RpcClient:
    """
    Async JSON-RPC client bound to one endpoint.

    Args:
        rpc_url: RPC endpoint URL
        timeout: Per-request HTTP timeout in seconds
        transport: Optional httpx transport (tests inject a MockTransport)
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self._timeout = timeout
        self._transport = transport
        self._ids = itertools.count(1)

    async def call(self, method: str, params: list) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: On transport failure or an RPC error payload
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }
        logger.debug("rpc -> %s %s", method, params)

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(self.rpc_url, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise RpcError(f"RPC transport error: {exc}") from exc
        except ValueError as exc:
            raise RpcError(f"RPC returned invalid JSON: {exc}") from exc

        if "error" in data:
            error = data["error"] or {}
            if isinstance(error, dict):
                raise RpcError(str(error.get("message") or error), code=error.get("code"))
            raise RpcError(str(error))

        return data.get("result")

    async def chain_id(self) -> int:
        return int(await self.call("eth_chainId", []), 16)

    async def get_nonce(self, address: str) -> int:
        result = await self.call("eth_getTransactionCount", [address, "pending"])
        return int(result, 16)

    async def get_gas_price(self) -> int:
        return int(await self.call("eth_gasPrice", []), 16)

    async def send_raw_transaction(self, raw_tx: str) -> str:
        """Send a signed raw transaction and return its 0x-prefixed hash."""
        return await self.call("eth_sendRawTransaction", [raw_tx])

    async def read_contract(
        self,
        contract_address: str,
        function_name: str,
        abi: Any,
        args: Optional[list] = None,
    ) -> Any:
        """
        Read from a smart contract (eth_call).

        Returns:
            Decoded return value(s), or None for empty return data
        """
        calldata = encode_call(abi, function_name, args or [])
        result = await self.call(
            "eth_call",
            [{"to": contract_address, "data": calldata}, "latest"],
        )

        if result is None or result == "0x":
            return None

        return decode_result(abi, function_name, result)

    async def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float = 120,
        poll_interval: float = 2.0,
    ) -> dict:
        """
        Wait for a transaction receipt.

        Raises:
            TimeoutError: If receipt not found within timeout
        """
        start = time.monotonic()
        while time.monotonic() - start < timeout:
            receipt = await self.call("eth_getTransactionReceipt", [tx_hash])
            if receipt is not None:
                return receipt
            await asyncio.sleep(poll_interval)

        raise TimeoutError(f"Transaction {tx_hash} not confirmed within {timeout}s")
