from __future__ import annotations

from typing import Optional

FUJI_CHAIN_ID = 43113
AVALANCHE_CHAIN_ID = 43114

ALLOWED_CHAIN_IDS = frozenset({FUJI_CHAIN_ID, AVALANCHE_CHAIN_ID})

WRONG_NETWORK_ADVISORY = "Switch to Avalanche Fuji or Mainnet"


def is_allowed(chain_id: Optional[int]) -> bool:
    """Whether writes are permitted on this chain.  Unknown (None) is not."""
    return chain_id in ALLOWED_CHAIN_IDS
