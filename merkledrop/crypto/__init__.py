"""
Core cryptographic utilities.

Keccak-256 hashing helpers and the canonical leaf encoder.
"""
from .hashing import (
    HASH_LENGTH,
    keccak256,
    hash_sorted_pair,
    to_hex,
    from_hex,
    require_hash,
)
from .encoding import (
    ADDRESS_LENGTH,
    UINT256_MAX,
    normalize_address,
    encode_amount,
    pack_leaf,
    encode_leaf,
    encode_balance,
)

__all__ = [
    "HASH_LENGTH",
    "keccak256",
    "hash_sorted_pair",
    "to_hex",
    "from_hex",
    "require_hash",
    "ADDRESS_LENGTH",
    "UINT256_MAX",
    "normalize_address",
    "encode_amount",
    "pack_leaf",
    "encode_leaf",
    "encode_balance",
]
