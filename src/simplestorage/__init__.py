__all__ = [
    # Configuration
    "ContractBinding",
    "Settings",
    "load_settings",
    # Errors
    "SimpleStorageError",
    "ConfigError",
    "ConnectionRejected",
    "InvalidInput",
    "WriteFailed",
    "WriteInFlight",
    "ReadFailed",
    "RpcError",
    # Chain
    "RpcClient",
    "SIMPLE_STORAGE_ABI",
    # Wallet
    "ChainConnector",
    "LocalKeyProvider",
    "WalletProvider",
    "WalletSession",
    # Core
    "ContractReader",
    "ContractWriter",
    "InteractionController",
    "ConnectionState",
    "WriteState",
    "ViewState",
    "WriteSuccess",
    "WriteFailure",
    "is_allowed",
    "parse_value",
]

from .chain.abi import SIMPLE_STORAGE_ABI
from .chain.rpc import RpcClient
from .config import ContractBinding, Settings, load_settings
from .core.controller import ConnectionState, InteractionController, ViewState, WriteState
from .core.guard import is_allowed
from .core.reader import ContractReader
from .core.writer import ContractWriter, WriteFailure, WriteSuccess, parse_value
from .errors import (
    ConfigError,
    ConnectionRejected,
    InvalidInput,
    ReadFailed,
    RpcError,
    SimpleStorageError,
    WriteFailed,
    WriteInFlight,
)
from .wallet.connector import ChainConnector, WalletSession
from .wallet.provider import LocalKeyProvider, WalletProvider
