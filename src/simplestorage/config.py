"""
Configuration - Contract binding and environment settings.

The contract binding is built once at startup and passed by reference to
every component that talks to the contract.  Values come from the process
environment, optionally seeded from ~/.simplestorage/.env or a local .env.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from .chain.abi import SIMPLE_STORAGE_ABI
from .errors import ConfigError


SIMPLESTORAGE_DIR = Path.home() / ".simplestorage"
SIMPLESTORAGE_ENV = SIMPLESTORAGE_DIR / ".env"

# Avalanche Fuji C-Chain
DEFAULT_RPC_URL = "https://api.avax-test.network/ext/bc/C/rpc"
DEFAULT_GAS_LIMIT = 100_000
DEFAULT_RECEIPT_TIMEOUT = 120


@dataclass(frozen=True)
class ContractBinding:
    """
    Fixed description of the deployed Simple Storage contract.

    Attributes:
        address: 0x-prefixed contract address
        abi: Contract ABI
        read_function: View function returning the stored uint256
        write_function: Function taking the new uint256 value
    """
    address: str
    abi: tuple[dict[str, Any], ...] = field(
        default=SIMPLE_STORAGE_ABI, repr=False, compare=False
    )
    read_function: str = "getValue"
    write_function: str = "setValue"


@dataclass(frozen=True)
class Settings:
    binding: ContractBinding
    rpc_url: str = DEFAULT_RPC_URL
    gas_limit: int = DEFAULT_GAS_LIMIT
    receipt_timeout: int = DEFAULT_RECEIPT_TIMEOUT


def load_env(env_path: Optional[Path] = None) -> None:
    """Load .env files into the process environment without overriding it."""
    env_path = env_path or SIMPLESTORAGE_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)
    load_dotenv(Path.cwd() / ".env", override=False)


def _int_setting(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw, 0)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


def load_settings(env_path: Optional[Path] = None) -> Settings:
    """
    Build settings from the environment.

    Raises:
        ConfigError: If CONTRACT_ADDRESS is missing or malformed
    """
    load_env(env_path)

    address = os.environ.get("CONTRACT_ADDRESS", "").strip()
    if not address:
        raise ConfigError("Contract address not found in env (CONTRACT_ADDRESS)")
    if not address.startswith("0x") or len(address) != 42:
        raise ConfigError(f"CONTRACT_ADDRESS is not a valid address: {address}")
    try:
        int(address[2:], 16)
    except ValueError:
        raise ConfigError(f"CONTRACT_ADDRESS is not a valid address: {address}")

    return Settings(
        binding=ContractBinding(address=address),
        rpc_url=os.environ.get("AVALANCHE_RPC") or DEFAULT_RPC_URL,
        gas_limit=_int_setting("GAS_LIMIT", DEFAULT_GAS_LIMIT),
        receipt_timeout=_int_setting("RECEIPT_TIMEOUT", DEFAULT_RECEIPT_TIMEOUT),
    )
