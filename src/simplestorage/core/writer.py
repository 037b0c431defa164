"""
ContractWriter - Submit setValue transactions.

Input is validated synchronously before anything touches the network.
At most one write is in flight; each accepted submission resolves to
exactly one WriteResult, delivered to exactly one of the two callbacks.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from ..chain.abi import UINT256_MAX, encode_call
from ..config import ContractBinding
from ..errors import InvalidInput, WriteFailed, WriteInFlight
from ..wallet.connector import ChainConnector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriteSuccess:
    tx_hash: str


@dataclass(frozen=True)
class WriteFailure:
    cause: WriteFailed


WriteResult = Union[WriteSuccess, WriteFailure]


def parse_value(raw: str) -> int:
    """
    Parse raw user input as a uint256.

    Only ASCII decimal digits are accepted, with optional surrounding
    whitespace.

    Raises:
        InvalidInput: If the input is empty, not an integer, or out of range
    """
    text = raw.strip()
    if not text or not text.isascii() or not text.isdigit():
        raise InvalidInput(raw)
    value = int(text)
    if value > UINT256_MAX:
        raise InvalidInput(raw)
    return value


class ContractWriter:
    """
    Args:
        binding: Contract binding
        connector: Connected wallet session used to sign and send
        receipt_timeout: Seconds to wait for the transaction receipt
    """

    def __init__(
        self,
        binding: ContractBinding,
        connector: ChainConnector,
        receipt_timeout: float = 120,
    ) -> None:
        self.binding = binding
        self.connector = connector
        self.receipt_timeout = receipt_timeout
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    def submit(
        self,
        value: int,
        on_success: Callable[[WriteSuccess], None],
        on_failure: Callable[[WriteFailure], None],
    ) -> "asyncio.Task[WriteResult]":
        """
        Start a write of `value`.

        Returns:
            Task resolving to the WriteResult after the callback ran

        Raises:
            WriteInFlight: If a previous write has not resolved yet
            InvalidInput: If value is outside uint256
        """
        if self._pending:
            raise WriteInFlight("A transaction is already pending")
        if value < 0 or value > UINT256_MAX:
            raise InvalidInput(str(value))

        calldata = encode_call(self.binding.abi, self.binding.write_function, [value])
        self._pending = True
        logger.debug("Submitting %s(%s)", self.binding.write_function, value)
        return asyncio.get_running_loop().create_task(
            self._run(calldata, on_success, on_failure)
        )

    async def _send(self, calldata: str) -> str:
        tx_hash = await self.connector.send_transaction(
            {"to": self.binding.address, "data": calldata, "value": 0}
        )
        receipt = await self.connector.wait_for_receipt(tx_hash, self.receipt_timeout)
        if int(str(receipt.get("status", "0x0")), 16) != 1:
            raise WriteFailed("Transaction reverted")
        return tx_hash

    async def _run(
        self,
        calldata: str,
        on_success: Callable[[WriteSuccess], None],
        on_failure: Callable[[WriteFailure], None],
    ) -> WriteResult:
        result: WriteResult
        try:
            tx_hash = await self._send(calldata)
        except WriteFailed as exc:
            result = WriteFailure(exc)
        except Exception as exc:
            result = WriteFailure(WriteFailed(str(exc) or None))
        else:
            result = WriteSuccess(tx_hash)
        finally:
            self._pending = False

        if isinstance(result, WriteSuccess):
            logger.info("Transaction %s succeeded", result.tx_hash)
            on_success(result)
        else:
            logger.warning("Transaction failed: %s", result.cause.cause)
            on_failure(result)
        return result
