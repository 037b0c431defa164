"""
ContractReader - Cached read of the stored value.

Read failures are logged and tolerated: the cached value stays unset and
the display keeps showing the loading placeholder until a later refresh
succeeds.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from eth_abi.exceptions import DecodingError

from ..chain.rpc import RpcClient
from ..config import ContractBinding
from ..errors import ReadFailed, RpcError

logger = logging.getLogger(__name__)

LOADING_PLACEHOLDER = "..."


class ContractReader:
    def __init__(self, binding: ContractBinding, rpc: RpcClient) -> None:
        self.binding = binding
        self.rpc = rpc
        self._value: Optional[int] = None
        self._last_error: Optional[ReadFailed] = None

    @property
    def value(self) -> Optional[int]:
        return self._value

    @property
    def is_loading(self) -> bool:
        return self._value is None

    @property
    def last_error(self) -> Optional[ReadFailed]:
        return self._last_error

    def display(self) -> str:
        if self._value is None:
            return LOADING_PLACEHOLDER
        return str(self._value)

    def invalidate(self) -> None:
        """Drop the cached value; it is stale until the next successful read."""
        self._value = None

    async def fetch(self) -> int:
        """
        Call the read function once.

        Raises:
            ReadFailed: On RPC error or an empty/malformed result
        """
        try:
            result = await self.rpc.read_contract(
                self.binding.address,
                self.binding.read_function,
                self.binding.abi,
            )
        except (RpcError, ValueError, DecodingError) as exc:
            raise ReadFailed(str(exc)) from exc

        if not isinstance(result, int):
            raise ReadFailed(f"{self.binding.read_function} returned no value")
        return result

    async def read(self) -> Optional[int]:
        """
        Fetch and cache the stored value.

        Returns:
            The fresh value, or None if the read failed
        """
        try:
            value = await self.fetch()
        except ReadFailed as exc:
            logger.warning("Reading %s failed: %s", self.binding.address, exc)
            self._last_error = exc
            return None

        self._value = value
        self._last_error = None
        logger.debug("Stored value at %s is %s", self.binding.address, value)
        return value

    async def refresh(self) -> Optional[int]:
        return await self.read()

    def schedule_refresh(self) -> "asyncio.Task[Optional[int]]":
        """Issue a refresh on the running loop without waiting for it."""
        return asyncio.get_running_loop().create_task(self.refresh())
