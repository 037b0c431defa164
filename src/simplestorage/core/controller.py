"""
InteractionController - Connection and write state for the Simple Storage UI.

Connection:  DISCONNECTED -> CONNECTING -> CONNECTED (network ok | wrong)
Write:       IDLE -> VALIDATING -> SUBMITTING -> SUCCESS | FAILED

The write state drops back to IDLE on the next input edit.  The status
line is display-only; whether a write may start depends solely on the
session, the network guard and the writer's pending flag.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Callable, Optional

from ..errors import ConnectionRejected, InvalidInput
from ..utils import shorten_address
from ..wallet.connector import ChainConnector, WalletSession
from .guard import WRONG_NETWORK_ADVISORY, is_allowed
from .reader import ContractReader
from .writer import ContractWriter, WriteFailure, WriteResult, WriteSuccess, parse_value

logger = logging.getLogger(__name__)

STATUS_INVALID_INPUT = "Invalid input value"
STATUS_SUBMITTED = "Transaction submitted..."
STATUS_SUCCESS = "Transaction success"
STATUS_FAILED = "Transaction failed"


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class WriteState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class ViewState:
    connection: ConnectionState
    account: Optional[str]
    short_account: str
    chain_id: Optional[int]
    network_ok: bool
    stored_value: str
    input_value: str
    status: Optional[str]
    advisory: Optional[str]
    submit_enabled: bool
    submit_label: str
    connect_label: str


class InteractionController:
    """
    Orchestrates the connector, reader and writer.

    Args:
        connector: Wallet session owner
        reader: Stored value reader
        writer: setValue writer
        on_status: Called with every new status line
    """

    def __init__(
        self,
        connector: ChainConnector,
        reader: ContractReader,
        writer: ContractWriter,
        on_status: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.connector = connector
        self.reader = reader
        self.writer = writer
        self.on_status = on_status

        self.input_value = ""
        self.status: Optional[str] = None
        self.write_state = WriteState.IDLE
        self.failure_reason: Optional[str] = None

        # Bumped on disconnect so late callbacks from an old session are ignored
        self._generation = 0
        self._write_task: Optional["asyncio.Task[WriteResult]"] = None
        self._refresh_task: Optional[asyncio.Task] = None

        connector.subscribe(self._on_wallet_change)

    # ============ Derived state ============

    @property
    def connection_state(self) -> ConnectionState:
        session = self.connector.session
        if session.pending:
            return ConnectionState.CONNECTING
        if session.connected:
            return ConnectionState.CONNECTED
        return ConnectionState.DISCONNECTED

    @property
    def network_ok(self) -> bool:
        return is_allowed(self.connector.chain_id)

    @property
    def can_submit(self) -> bool:
        return (
            self.connection_state is ConnectionState.CONNECTED
            and self.network_ok
            and not self.writer.pending
        )

    @property
    def advisory(self) -> Optional[str]:
        if self.connection_state is ConnectionState.CONNECTED and not self.network_ok:
            return WRONG_NETWORK_ADVISORY
        return None

    def snapshot(self) -> ViewState:
        connection = self.connection_state
        return ViewState(
            connection=connection,
            account=self.connector.account,
            short_account=shorten_address(self.connector.account),
            chain_id=self.connector.chain_id,
            network_ok=self.network_ok,
            stored_value=self.reader.display(),
            input_value=self.input_value,
            status=self.status,
            advisory=self.advisory,
            submit_enabled=self.can_submit,
            submit_label="Updating..." if self.writer.pending else "Set Value",
            connect_label=(
                "Connecting..." if connection is ConnectionState.CONNECTING else "Connect Wallet"
            ),
        )

    # ============ Commands ============

    async def start(self) -> None:
        """Load the stored value.  Needs no wallet session."""
        await self.reader.read()

    async def connect(self) -> bool:
        """Connect the wallet.  A rejection leaves the controller disconnected."""
        if self.connection_state is ConnectionState.CONNECTING:
            logger.debug("connect ignored: a connection request is already pending")
            return False
        try:
            await self.connector.connect()
        except ConnectionRejected as exc:
            logger.info("Connect rejected: %s", exc)
            return False
        return True

    def disconnect(self) -> None:
        self.connector.disconnect()

    def edit_input(self, text: str) -> None:
        self.input_value = text
        if self.write_state is not WriteState.IDLE:
            logger.debug("write: %s -> idle", self.write_state.value)
            self.write_state = WriteState.IDLE

    def submit(self) -> Optional["asyncio.Task[WriteResult]"]:
        """
        Validate the input and start a write.

        Returns:
            The write task, or None if nothing was sent (control disabled
            or invalid input)
        """
        if not self.can_submit:
            logger.debug(
                "submit ignored: state=%s network_ok=%s pending=%s",
                self.connection_state.value, self.network_ok, self.writer.pending,
            )
            return None

        self._transition(WriteState.VALIDATING)
        try:
            value = parse_value(self.input_value)
        except InvalidInput:
            self.failure_reason = STATUS_INVALID_INPUT
            self._transition(WriteState.FAILED)
            self._set_status(STATUS_INVALID_INPUT)
            return None

        self._transition(WriteState.SUBMITTING)
        self._set_status(STATUS_SUBMITTED)
        generation = self._generation
        self._write_task = self.writer.submit(
            value,
            on_success=partial(self._on_write_success, generation),
            on_failure=partial(self._on_write_failure, generation),
        )
        return self._write_task

    async def wait_idle(self) -> None:
        """Wait for the current write and the refresh it triggered."""
        if self._write_task is not None:
            await self._write_task
        if self._refresh_task is not None:
            await self._refresh_task

    # ============ Callbacks ============

    def _on_wallet_change(self, session: WalletSession, chain_id: Optional[int]) -> None:
        logger.debug(
            "wallet: connected=%s pending=%s chain=%s allowed=%s",
            session.connected, session.pending, chain_id, is_allowed(chain_id),
        )
        if session.connected or session.pending:
            return
        # Session dropped, by us or by the provider
        self._generation += 1
        self.write_state = WriteState.IDLE
        self.status = None
        self.failure_reason = None

    def _on_write_success(self, generation: int, result: WriteSuccess) -> None:
        if generation != self._generation:
            logger.debug("Ignoring success of %s from a closed session", result.tx_hash)
            return
        self._transition(WriteState.SUCCESS)
        self._set_status(STATUS_SUCCESS)
        self.input_value = ""
        self.reader.invalidate()
        self._refresh_task = self.reader.schedule_refresh()

    def _on_write_failure(self, generation: int, result: WriteFailure) -> None:
        if generation != self._generation:
            logger.debug("Ignoring failure from a closed session: %s", result.cause)
            return
        self.failure_reason = result.cause.cause or STATUS_FAILED
        self._transition(WriteState.FAILED)
        self._set_status(self.failure_reason)

    def _transition(self, state: WriteState) -> None:
        logger.debug("write: %s -> %s", self.write_state.value, state.value)
        self.write_state = state

    def _set_status(self, status: str) -> None:
        self.status = status
        if self.on_status is not None:
            self.on_status(status)
