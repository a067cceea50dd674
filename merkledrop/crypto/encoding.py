"""
Canonical Leaf Encoding

Packs an (account, amount) pair exactly like Solidity's
``abi.encodePacked(address, uint256)`` and hashes it with keccak-256:

    leaf = keccak256(address[20] || amount.to_bytes(32, "big"))

A distribution contract can recompute the same leaf from ``msg.sender``
and the claimed amount, which is what makes the root verifiable on-chain.
"""
from __future__ import annotations

from typing import Any

from merkledrop.crypto.hashing import keccak256
from merkledrop.schemas.errors import EncodingError, MalformedAmountError
from merkledrop.schemas.ledger import ADDRESS_LENGTH, AccountBalance, canonical_address, parse_amount


AMOUNT_LENGTH = 32
UINT256_MAX = 2**256 - 1


def normalize_address(account_id: Any) -> bytes:
    """
    Normalize an account identifier to its 20 raw bytes.

    Args:
        account_id: 20 raw bytes, or a hex string with or without 0x prefix

    Returns:
        20-byte address

    Raises:
        EncodingError: If the identifier is not exactly 20 bytes
    """
    return bytes.fromhex(canonical_address(account_id)[2:])


def encode_amount(amount: Any) -> bytes:
    """
    Encode an amount as a 32-byte big-endian unsigned integer.

    Raises:
        EncodingError: If the amount is negative, not an integer,
            or does not fit in 256 bits
    """
    try:
        value = parse_amount(amount)
    except MalformedAmountError as e:
        raise EncodingError(e.message, details=e.details) from e
    if value > UINT256_MAX:
        raise EncodingError(
            "Amount does not fit in uint256",
            details={"amount": str(value)},
        )
    return value.to_bytes(AMOUNT_LENGTH, "big")


def pack_leaf(account_id: Any, amount: Any) -> bytes:
    """Return the 52-byte packed preimage of a leaf."""
    return normalize_address(account_id) + encode_amount(amount)


def encode_leaf(account_id: Any, amount: Any) -> bytes:
    """
    Compute the leaf hash for one ledger entry.

    Args:
        account_id: 20-byte account identifier (bytes or hex string)
        amount: Unsigned integer up to 256 bits (int or decimal string)

    Returns:
        32-byte leaf hash

    Raises:
        EncodingError: If either input violates its size constraint
    """
    return keccak256(pack_leaf(account_id, amount))


def encode_balance(balance: AccountBalance) -> bytes:
    """Compute the leaf hash for an AccountBalance."""
    return encode_leaf(balance.address, balance.amount)


__all__ = [
    "ADDRESS_LENGTH",
    "AMOUNT_LENGTH",
    "UINT256_MAX",
    "normalize_address",
    "encode_amount",
    "pack_leaf",
    "encode_leaf",
    "encode_balance",
]
