"""Shared fakes: an in-memory ledger that plays both RPC and wallet."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import pytest
from eth_abi import decode

from simplestorage.config import ContractBinding
from simplestorage.core.controller import InteractionController
from simplestorage.core.reader import ContractReader
from simplestorage.core.writer import ContractWriter
from simplestorage.errors import ConnectionRejected, RpcError
from simplestorage.wallet.connector import ChainConnector

CONTRACT_ADDRESS = "0x" + "ab" * 20
ACCOUNT = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


class FakeLedger:
    """
    Stores one uint256 and answers both reader and wallet-provider calls.

    Knobs:
        fail_reads: eth_call raises RpcError
        reject_connect: request_accounts raises ConnectionRejected
        send_error: send_transaction raises RpcError with this message
        revert: receipts report status 0
        gate: send_transaction blocks until this event is set
        connect_gate: request_accounts blocks until this event is set
    """

    def __init__(self, value: int = 0, chain_id: Optional[int] = 43114) -> None:
        self.value = value
        self._chain_id = chain_id
        self.fail_reads = False
        self.reject_connect = False
        self.send_error: Optional[str] = None
        self.revert = False
        self.gate: Optional[asyncio.Event] = None
        self.connect_gate: Optional[asyncio.Event] = None
        self.sent: list[dict[str, Any]] = []
        self.reads = 0

    async def read_contract(self, address, function_name, abi, args=None) -> Any:
        self.reads += 1
        if self.fail_reads:
            raise RpcError("upstream unavailable")
        return self.value

    async def chain_id(self) -> int:
        if self._chain_id is None:
            raise RpcError("no chain")
        return self._chain_id

    def switch_chain(self, chain_id: Optional[int]) -> None:
        self._chain_id = chain_id

    async def request_accounts(self) -> list[str]:
        if self.connect_gate is not None:
            await self.connect_gate.wait()
        if self.reject_connect:
            raise ConnectionRejected("User rejected the request.")
        return [ACCOUNT]

    async def send_transaction(self, tx: dict[str, Any]) -> str:
        self.sent.append(tx)
        if self.gate is not None:
            await self.gate.wait()
        if self.send_error is not None:
            raise RpcError(self.send_error)
        if not self.revert:
            (self.value,) = decode(["uint256"], bytes.fromhex(tx["data"][10:]))
        return "0x" + f"{len(self.sent):064x}"

    async def wait_for_receipt(self, tx_hash: str, timeout: float) -> dict:
        return {"transactionHash": tx_hash, "status": "0x0" if self.revert else "0x1"}


@pytest.fixture()
def binding() -> ContractBinding:
    return ContractBinding(address=CONTRACT_ADDRESS)


@pytest.fixture()
def ledger() -> FakeLedger:
    return FakeLedger(value=42)


@pytest.fixture()
def statuses() -> list[str]:
    return []


@pytest.fixture()
def controller(binding: ContractBinding, ledger: FakeLedger, statuses: list[str]) -> InteractionController:
    connector = ChainConnector(ledger)
    reader = ContractReader(binding, ledger)
    writer = ContractWriter(binding, connector, receipt_timeout=5)
    return InteractionController(connector, reader, writer, on_status=statuses.append)
