"""
Hashing Utilities
Keccak-256 hashing and hex helpers for Merkle commitments.

This module provides:
- keccak256 for raw bytes (the EVM hash, so roots can be checked on-chain)
- Sorted-pair parent hashing
- Hex encoding/decoding with 0x prefix
- Fixed-size hash validation

Security/Determinism Notes:
- Always hash raw bytes exactly as specified
- Pair hashing orders the two children by big-endian byte comparison,
  so a parent never depends on which child is called "left"
"""
from __future__ import annotations

from typing import Any

from eth_utils import keccak

from merkledrop.schemas.errors import MalformedProofError


# Size of every leaf, node and root in the tree
HASH_LENGTH = 32


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=data)


def hash_sorted_pair(a: bytes, b: bytes) -> bytes:
    """
    Hash two sibling nodes, smaller byte string first.

    Rule: parent = keccak256(min(a, b) + max(a, b))

    Args:
        a: One child hash
        b: The other child hash

    Returns:
        32-byte parent hash
    """
    if a <= b:
        return keccak256(a + b)
    return keccak256(b + a)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def require_hash(value: Any, name: str = "hash") -> bytes:
    """
    Check that a value is a 32-byte hash and return it as bytes.

    Accepts bytes-like values or 0x-prefixed hex strings.

    Raises:
        MalformedProofError: If the value is not a well-formed 32-byte hash
    """
    if isinstance(value, str):
        try:
            value = from_hex(value)
        except ValueError as e:
            raise MalformedProofError(
                f"{name} is not valid hex: {e}",
                details={"field": name},
            ) from e
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise MalformedProofError(
            f"{name} must be bytes, got {type(value).__name__}",
            details={"field": name},
        )
    value = bytes(value)
    if len(value) != HASH_LENGTH:
        raise MalformedProofError(
            f"{name} must be {HASH_LENGTH} bytes, got {len(value)}",
            details={"field": name, "length": len(value)},
        )
    return value


__all__ = [
    "HASH_LENGTH",
    "keccak256",
    "hash_sorted_pair",
    "to_hex",
    "from_hex",
    "require_hash",
]
