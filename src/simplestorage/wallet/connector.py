"""
ChainConnector - Wallet session with live account and chain id.

The session is owned by the connector; everything else only observes it
through subscribe() and issues connect/disconnect commands.  The chain id
can change at any moment (the user switches networks in the wallet), so
listeners are called on every change and must re-derive what depends on it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..errors import ConnectionRejected, RpcError
from .provider import WalletProvider

logger = logging.getLogger(__name__)

Listener = Callable[["WalletSession", Optional[int]], None]


@dataclass(frozen=True)
class WalletSession:
    """
    Snapshot of the wallet session.

    `account` is set iff `connected` is true; `pending` marks an
    outstanding connect request.
    """
    account: Optional[str] = None
    connected: bool = False
    pending: bool = False

    def __post_init__(self) -> None:
        if (self.account is not None) != self.connected:
            raise ValueError("account must be present iff the session is connected")


class ChainConnector:
    def __init__(self, provider: WalletProvider) -> None:
        self.provider = provider
        self._session = WalletSession()
        self._chain_id: Optional[int] = None
        self._listeners: list[Listener] = []
        # Bumped by every connect request and every disconnect
        self._request = 0

    @property
    def session(self) -> WalletSession:
        return self._session

    @property
    def account(self) -> Optional[str]:
        return self._session.account

    @property
    def chain_id(self) -> Optional[int]:
        return self._chain_id

    @property
    def connected(self) -> bool:
        return self._session.connected

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _publish(self) -> None:
        for listener in list(self._listeners):
            listener(self._session, self._chain_id)

    def _set_session(self, session: WalletSession) -> None:
        self._session = session
        self._publish()

    async def connect(self) -> str:
        """
        Request a wallet session.

        Returns:
            The connected account address

        Raises:
            ConnectionRejected: If the provider declines, a request is
                                already pending, or disconnect() ran while
                                waiting; the session ends up disconnected
        """
        if self._session.connected:
            return self._session.account  # type: ignore[return-value]
        if self._session.pending:
            raise ConnectionRejected("A connection request is already pending")

        self._request += 1
        request = self._request
        self._set_session(WalletSession(pending=True))
        try:
            accounts = await self.provider.request_accounts()
            chain_id = await self.provider.chain_id()
        except (ValueError, RpcError, ConnectionRejected) as exc:
            logger.warning("Wallet connection rejected: %s", exc)
            if request == self._request:
                self._set_session(WalletSession())
            raise ConnectionRejected(str(exc)) from exc

        if request != self._request:
            logger.info("Dropping connection result: disconnected while connecting")
            raise ConnectionRejected("Disconnected while connecting")

        if not accounts:
            logger.warning("Wallet connection rejected: provider returned no accounts")
            self._set_session(WalletSession())
            raise ConnectionRejected("Wallet provider returned no accounts")

        self._chain_id = chain_id
        self._set_session(WalletSession(account=accounts[0], connected=True))
        logger.info("Connected %s on chain %s", accounts[0], chain_id)
        return accounts[0]

    def disconnect(self) -> None:
        """Clear the session and abandon any pending connect.  Always succeeds."""
        self._request += 1
        if self._session.connected:
            logger.info("Disconnected %s", self._session.account)
        self._session = WalletSession()
        self._publish()

    def set_chain_id(self, chain_id: Optional[int]) -> None:
        """Publish an externally observed network switch."""
        if chain_id == self._chain_id:
            return
        logger.info("Chain changed: %s -> %s", self._chain_id, chain_id)
        self._chain_id = chain_id
        self._publish()

    async def sync_chain(self) -> Optional[int]:
        """Re-query the provider's chain id and publish it if it moved."""
        try:
            chain_id = await self.provider.chain_id()
        except (ValueError, RpcError) as exc:
            logger.warning("Could not query chain id: %s", exc)
            return self._chain_id
        self.set_chain_id(chain_id)
        return chain_id

    async def send_transaction(self, tx: dict[str, Any]) -> str:
        if not self._session.connected:
            raise ConnectionRejected("Wallet is not connected")
        return await self.provider.send_transaction({**tx, "chainId": self._chain_id})

    async def wait_for_receipt(self, tx_hash: str, timeout: float) -> dict:
        return await self.provider.wait_for_receipt(tx_hash, timeout)
