"""
Hashing Unit Tests
Tests for merkledrop/crypto/hashing.py

Tests:
- keccak256 known values and stability
- sorted-pair hashing is symmetric
- to_hex/from_hex round trip and validation
- require_hash shape checks
"""
import pytest
from eth_utils import keccak

from merkledrop.crypto.hashing import (
    HASH_LENGTH,
    keccak256,
    hash_sorted_pair,
    to_hex,
    from_hex,
    require_hash,
)
from merkledrop.schemas.errors import MalformedProofError


class TestKeccak256:
    """Tests for keccak256() function."""

    def test_keccak_empty_known_value(self):
        """Keccak-256 of empty input is the well-known EVM constant."""
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_keccak_is_not_sha3_256(self):
        """Keccak padding differs from NIST SHA3-256."""
        import hashlib
        assert keccak256(b"") != hashlib.sha3_256(b"").digest()

    def test_keccak_matches_eth_utils(self):
        data = b"merkledrop"
        assert keccak256(data) == keccak(data)
        assert len(keccak256(data)) == HASH_LENGTH

    def test_keccak_deterministic(self):
        assert keccak256(b"abc") == keccak256(b"abc")
        assert keccak256(b"abc") != keccak256(b"abd")


class TestHashSortedPair:
    """Tests for hash_sorted_pair()."""

    def test_symmetric(self):
        a = keccak256(b"a")
        b = keccak256(b"b")
        assert hash_sorted_pair(a, b) == hash_sorted_pair(b, a)

    def test_smaller_hash_first(self):
        a = keccak256(b"a")
        b = keccak256(b"b")
        low, high = sorted([a, b])
        assert hash_sorted_pair(a, b) == keccak256(low + high)

    def test_equal_children(self):
        a = keccak256(b"a")
        assert hash_sorted_pair(a, a) == keccak256(a + a)


class TestHexConversion:
    """Tests for to_hex() and from_hex()."""

    def test_to_hex_prefix(self):
        assert to_hex(bytes.fromhex("deadbeef")) == "0xdeadbeef"

    def test_round_trip(self):
        data = keccak256(b"round trip")
        assert from_hex(to_hex(data)) == data

    def test_from_hex_requires_prefix(self):
        with pytest.raises(ValueError, match="0x"):
            from_hex("deadbeef")

    def test_from_hex_odd_length(self):
        with pytest.raises(ValueError, match="even length"):
            from_hex("0xabc")

    def test_from_hex_invalid_chars(self):
        with pytest.raises(ValueError, match="Invalid hex"):
            from_hex("0xzz")


class TestRequireHash:
    """Tests for require_hash()."""

    def test_accepts_bytes(self):
        h = keccak256(b"x")
        assert require_hash(h) == h

    def test_accepts_hex(self):
        h = keccak256(b"x")
        assert require_hash(to_hex(h)) == h

    def test_rejects_wrong_length(self):
        with pytest.raises(MalformedProofError, match="32 bytes"):
            require_hash(b"\x00" * 31, "leaf")

    def test_rejects_bad_hex(self):
        with pytest.raises(MalformedProofError, match="not valid hex"):
            require_hash("not-hex", "root")

    def test_rejects_other_types(self):
        with pytest.raises(MalformedProofError, match="must be bytes"):
            require_hash(12345, "proof[0]")
