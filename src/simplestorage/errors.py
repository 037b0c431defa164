"""
Error taxonomy for Simple Storage.

Every error carries the process exit code the CLI uses when it surfaces
the error to the user.
"""

from __future__ import annotations

from typing import Optional


class SimpleStorageError(RuntimeError):
    exit_code: int = 1


class ConfigError(SimpleStorageError):
    exit_code = 2


class ConnectionRejected(SimpleStorageError):
    exit_code = 3


class InvalidInput(SimpleStorageError):
    exit_code = 4

    def __init__(self, raw: str) -> None:
        super().__init__(f"Invalid input value: {raw!r}")
        self.raw = raw


class WriteFailed(SimpleStorageError):
    exit_code = 5

    def __init__(self, cause: Optional[str] = None) -> None:
        super().__init__(cause or "")
        self.cause = cause


class WriteInFlight(SimpleStorageError):
    exit_code = 6


class ReadFailed(SimpleStorageError):
    exit_code = 7


class RpcError(SimpleStorageError):
    """JSON-RPC error payload or transport failure."""

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code
