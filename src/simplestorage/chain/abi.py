"""
ABI codec - Function selectors, calldata encoding and result decoding.

The Simple Storage ABI is small and fixed, so it ships inline instead of
being loaded from a build artifact.
"""

from __future__ import annotations

from typing import Any, Iterable

from eth_abi import decode, encode
from eth_hash.auto import keccak


SIMPLE_STORAGE_ABI: tuple[dict[str, Any], ...] = (
    {
        "inputs": [],
        "name": "getValue",
        "outputs": [{"type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"name": "_value", "type": "uint256"}],
        "name": "setValue",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
)

UINT256_MAX = 2**256 - 1


def find_function(abi: Iterable[dict[str, Any]], function_name: str) -> dict[str, Any]:
    """
    Look up a function entry in an ABI.

    Raises:
        ValueError: If the function is not in the ABI
    """
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValueError(f"Function {function_name} not found in ABI")


def function_signature(entry: dict[str, Any]) -> str:
    input_types = [inp["type"] for inp in entry.get("inputs", [])]
    return f"{entry['name']}({','.join(input_types)})"


def function_selector(entry: dict[str, Any]) -> bytes:
    """First 4 bytes of keccak256 of the canonical signature."""
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(function_signature(entry).encode("utf-8"))[:4]


def encode_call(abi: Iterable[dict[str, Any]], function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Args:
        abi: Contract ABI
        function_name: Function name to call
        args: Function arguments

    Returns:
        0x-prefixed hex encoded calldata
    """
    entry = find_function(abi, function_name)
    input_types = [inp["type"] for inp in entry.get("inputs", [])]
    if len(args) != len(input_types):
        raise ValueError(
            f"{function_name} expects {len(input_types)} argument(s), got {len(args)}"
        )

    encoded_args = encode(input_types, args) if args else b""
    return "0x" + function_selector(entry).hex() + encoded_args.hex()


def decode_result(abi: Iterable[dict[str, Any]], function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        Decoded result (single value, tuple, or None for no outputs)
    """
    entry = find_function(abi, function_name)
    output_types = [out["type"] for out in entry.get("outputs", [])]
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:]) if data.startswith("0x") else bytes.fromhex(data)
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded
