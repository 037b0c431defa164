"""Tests for input parsing and the single in-flight write."""

from __future__ import annotations

import asyncio

import pytest

from simplestorage.chain.abi import UINT256_MAX
from simplestorage.config import ContractBinding
from simplestorage.core.writer import ContractWriter, WriteFailure, WriteSuccess, parse_value
from simplestorage.errors import InvalidInput, WriteInFlight
from simplestorage.wallet.connector import ChainConnector

from conftest import CONTRACT_ADDRESS, FakeLedger


class TestParseValue:
    @pytest.mark.parametrize(
        "raw, expected",
        [("0", 0), ("100", 100), (" 12 ", 12), ("007", 7), (str(UINT256_MAX), UINT256_MAX)],
    )
    def test_valid(self, raw: str, expected: int) -> None:
        assert parse_value(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        ["", "   ", "abc", "-1", "+5", "1.5", "1e3", "0x10", "12abc", "١٢", str(UINT256_MAX + 1)],
    )
    def test_invalid(self, raw: str) -> None:
        with pytest.raises(InvalidInput):
            parse_value(raw)


def _writer(binding: ContractBinding, ledger: FakeLedger) -> tuple[ContractWriter, ChainConnector]:
    connector = ChainConnector(ledger)
    return ContractWriter(binding, connector, receipt_timeout=5), connector


class TestSubmit:
    def test_success_fires_only_success(self, binding: ContractBinding, ledger: FakeLedger) -> None:
        writer, connector = _writer(binding, ledger)
        successes: list[WriteSuccess] = []
        failures: list[WriteFailure] = []

        async def scenario():
            await connector.connect()
            task = writer.submit(100, successes.append, failures.append)
            assert writer.pending
            return await task

        result = asyncio.run(scenario())

        assert isinstance(result, WriteSuccess)
        assert successes == [result]
        assert failures == []
        assert not writer.pending
        assert ledger.value == 100
        assert ledger.sent[0]["to"] == CONTRACT_ADDRESS
        assert ledger.sent[0]["chainId"] == 43114

    def test_provider_error_fires_only_failure(self, binding: ContractBinding, ledger: FakeLedger) -> None:
        writer, connector = _writer(binding, ledger)
        ledger.send_error = "insufficient funds for gas * price + value"
        successes: list[WriteSuccess] = []
        failures: list[WriteFailure] = []

        async def scenario():
            await connector.connect()
            return await writer.submit(5, successes.append, failures.append)

        result = asyncio.run(scenario())

        assert isinstance(result, WriteFailure)
        assert successes == []
        assert failures == [result]
        assert result.cause.cause == "insufficient funds for gas * price + value"
        assert not writer.pending
        assert ledger.value == 42

    def test_revert_is_failure(self, binding: ContractBinding, ledger: FakeLedger) -> None:
        writer, connector = _writer(binding, ledger)
        ledger.revert = True
        failures: list[WriteFailure] = []

        async def scenario():
            await connector.connect()
            return await writer.submit(5, lambda r: None, failures.append)

        result = asyncio.run(scenario())
        assert isinstance(result, WriteFailure)
        assert result.cause.cause == "Transaction reverted"

    def test_not_connected_is_failure(self, binding: ContractBinding, ledger: FakeLedger) -> None:
        writer, _ = _writer(binding, ledger)

        async def scenario():
            return await writer.submit(5, lambda r: None, lambda r: None)

        result = asyncio.run(scenario())
        assert isinstance(result, WriteFailure)
        assert ledger.sent == []

    def test_second_submit_while_pending_rejected(self, binding: ContractBinding, ledger: FakeLedger) -> None:
        writer, connector = _writer(binding, ledger)

        async def scenario():
            ledger.gate = asyncio.Event()
            await connector.connect()
            task = writer.submit(1, lambda r: None, lambda r: None)
            with pytest.raises(WriteInFlight):
                writer.submit(2, lambda r: None, lambda r: None)
            ledger.gate.set()
            await task

        asyncio.run(scenario())
        assert len(ledger.sent) == 1
        assert ledger.value == 1

    def test_out_of_range_rejected_before_pending(self, binding: ContractBinding, ledger: FakeLedger) -> None:
        writer, _ = _writer(binding, ledger)

        async def scenario():
            with pytest.raises(InvalidInput):
                writer.submit(UINT256_MAX + 1, lambda r: None, lambda r: None)

        asyncio.run(scenario())
        assert not writer.pending
