"""
ECDSA / secp256k1 key loading for the local wallet provider.

Keys are read from the PRIVATE_KEY environment variable, optionally seeded
from ~/.simplestorage/.env (hex format).

Dependencies: eth-account (lightweight, no full web3.py needed)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..config import SIMPLESTORAGE_ENV


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load private key from .env file or environment.

    Args:
        env_path: Path to .env file (default: ~/.simplestorage/.env)

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If PRIVATE_KEY is not set
    """
    env_path = env_path or SIMPLESTORAGE_ENV

    if env_path.exists():
        load_dotenv(env_path, override=False)

    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ValueError(f"PRIVATE_KEY not found. Set it in the environment or in {env_path}")

    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    If private_key is None, it is loaded from the environment.
    """
    if private_key is None:
        private_key = load_private_key()
    return Account.from_key(private_key)
