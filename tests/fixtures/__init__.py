"""
Test fixtures package for merkledrop tests.

This package provides factory functions and constants for creating test objects.

Usage:
    from fixtures import ADDR_AA, make_records

    def test_something():
        records = make_records([(ADDR_AA, 100)])
"""

from .common import (
    ADDR_AA,
    ADDR_BB,
    ADDR_CC,
    make_address,
    make_leaves,
    make_records,
    make_ledger,
)

__all__ = [
    "ADDR_AA",
    "ADDR_BB",
    "ADDR_CC",
    "make_address",
    "make_leaves",
    "make_records",
    "make_ledger",
]
