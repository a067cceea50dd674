"""
Common test fixtures shared by all modules.

Provides factory functions for:
- RawRecord sequences
- Ledgers
- Leaf hashes
"""

from merkledrop.crypto.hashing import keccak256
from merkledrop.ledger.aggregator import Ledger
from merkledrop.schemas.ledger import AccountBalance, RawRecord


ADDR_AA = "0x" + "aa" * 20
ADDR_BB = "0x" + "bb" * 20
ADDR_CC = "0x" + "cc" * 20


def make_address(i: int) -> str:
    """Deterministic distinct address for index i."""
    return "0x" + f"{i:040x}"


def make_records(pairs) -> list[RawRecord]:
    """Build RawRecords from (address, amount) pairs."""
    return [RawRecord(address=address, amount=str(amount)) for address, amount in pairs]


def make_ledger(pairs) -> Ledger:
    """Build a Ledger from (address, amount) pairs, keeping their order."""
    return Ledger(AccountBalance(address=address, amount=amount) for address, amount in pairs)


def make_leaves(n: int) -> list[bytes]:
    """n distinct 32-byte leaves."""
    return [keccak256(f"leaf{i}".encode()) for i in range(n)]
