"""Tests for the wallet session owner."""

from __future__ import annotations

import asyncio
from typing import Optional

import pytest

from simplestorage.errors import ConnectionRejected
from simplestorage.wallet.connector import ChainConnector, WalletSession

from conftest import ACCOUNT, FakeLedger


class TestWalletSession:
    def test_account_requires_connected(self) -> None:
        with pytest.raises(ValueError):
            WalletSession(account=ACCOUNT, connected=False)
        with pytest.raises(ValueError):
            WalletSession(account=None, connected=True)


class TestConnect:
    def test_connect_sets_account_and_chain(self, ledger: FakeLedger) -> None:
        connector = ChainConnector(ledger)
        account = asyncio.run(connector.connect())

        assert account == ACCOUNT
        assert connector.connected
        assert connector.account == ACCOUNT
        assert connector.chain_id == 43114

    def test_rejection_leaves_session_unchanged(self, ledger: FakeLedger) -> None:
        ledger.reject_connect = True
        connector = ChainConnector(ledger)

        with pytest.raises(ConnectionRejected):
            asyncio.run(connector.connect())
        assert connector.session == WalletSession()

    def test_pending_published_during_connect(self, ledger: FakeLedger) -> None:
        connector = ChainConnector(ledger)
        seen: list[WalletSession] = []
        connector.subscribe(lambda session, chain_id: seen.append(session))

        asyncio.run(connector.connect())

        assert seen[0].pending
        assert seen[-1].connected and not seen[-1].pending

    def test_disconnect_clears(self, ledger: FakeLedger) -> None:
        connector = ChainConnector(ledger)
        asyncio.run(connector.connect())
        connector.disconnect()

        assert not connector.connected
        assert connector.account is None

    def test_disconnect_when_disconnected(self, ledger: FakeLedger) -> None:
        connector = ChainConnector(ledger)
        connector.disconnect()
        assert connector.session == WalletSession()


class TestChainChanges:
    def test_set_chain_id_notifies_once(self, ledger: FakeLedger) -> None:
        connector = ChainConnector(ledger)
        seen: list[Optional[int]] = []
        connector.subscribe(lambda session, chain_id: seen.append(chain_id))

        connector.set_chain_id(1)
        connector.set_chain_id(1)
        connector.set_chain_id(43113)

        assert seen == [1, 43113]

    def test_sync_chain_picks_up_switch(self, ledger: FakeLedger) -> None:
        connector = ChainConnector(ledger)
        asyncio.run(connector.connect())

        ledger.switch_chain(1)
        assert asyncio.run(connector.sync_chain()) == 1
        assert connector.chain_id == 1

    def test_unsubscribe(self, ledger: FakeLedger) -> None:
        connector = ChainConnector(ledger)
        seen: list[Optional[int]] = []

        def listener(session: WalletSession, chain_id: Optional[int]) -> None:
            seen.append(chain_id)

        connector.subscribe(listener)
        connector.unsubscribe(listener)
        connector.set_chain_id(5)
        assert seen == []


class TestConnectRaces:
    def test_disconnect_while_connecting_wins(self, ledger: FakeLedger) -> None:
        connector = ChainConnector(ledger)

        async def scenario():
            ledger.connect_gate = asyncio.Event()
            task = asyncio.ensure_future(connector.connect())
            await asyncio.sleep(0)
            assert connector.session.pending

            connector.disconnect()
            ledger.connect_gate.set()
            with pytest.raises(ConnectionRejected):
                await task

        asyncio.run(scenario())
        assert connector.session == WalletSession()
        assert connector.account is None

    def test_overlapping_connect_rejected(self, ledger: FakeLedger) -> None:
        connector = ChainConnector(ledger)

        async def scenario():
            ledger.connect_gate = asyncio.Event()
            first = asyncio.ensure_future(connector.connect())
            await asyncio.sleep(0)

            with pytest.raises(ConnectionRejected):
                await connector.connect()
            assert connector.session.pending

            ledger.connect_gate.set()
            return await first

        assert asyncio.run(scenario()) == ACCOUNT
        assert connector.session == WalletSession(account=ACCOUNT, connected=True)

    def test_rejection_after_pending_never_restores_pending(self, ledger: FakeLedger) -> None:
        connector = ChainConnector(ledger)
        ledger.reject_connect = True

        async def scenario():
            ledger.connect_gate = asyncio.Event()
            first = asyncio.ensure_future(connector.connect())
            await asyncio.sleep(0)
            with pytest.raises(ConnectionRejected):
                await connector.connect()

            ledger.connect_gate.set()
            with pytest.raises(ConnectionRejected):
                await first

        asyncio.run(scenario())
        assert connector.session == WalletSession()
