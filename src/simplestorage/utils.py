from __future__ import annotations

from typing import Optional


def shorten_address(address: Optional[str]) -> str:
    if not address:
        return ""
    return f"{address[:6]}...{address[-4:]}"
