"""
Ledger Aggregator

Merges balance records from two independent sources (e.g. the same token
locked on two chains) into one deduplicated ledger:

1. Primary records are inserted in arrival order. A primary source is
   expected to be deduplicated upstream, so a repeated account is a defect.
2. Secondary records are folded in: an account already present has the
   amount added to it, a new account is appended after all primary entries.
3. The result is sorted by amount descending; ties keep merge order.

Conservation: the ledger total always equals the primary total plus the
secondary total. Amounts are Python ints, so there is no overflow.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence

from merkledrop.schemas.errors import DuplicateAccountError, EncodingError
from merkledrop.schemas.ledger import AccountBalance, RawRecord, canonical_address, parse_amount


logger = logging.getLogger(__name__)

PRIMARY = "primary"
SECONDARY = "secondary"


class Ledger:
    """
    Immutable, ordered collection of AccountBalance entries.

    Addresses are unique in canonical form; lookups accept any spelling
    of an address and are O(1).
    """

    def __init__(self, entries: Iterable[AccountBalance]) -> None:
        self._entries: tuple[AccountBalance, ...] = tuple(entries)
        self._index: dict[str, int] = {}
        for i, entry in enumerate(self._entries):
            if entry.address in self._index:
                raise DuplicateAccountError(entry.address, source="ledger", index=i)
            self._index[entry.address] = i

    @classmethod
    def from_records(cls, records: Iterable[RawRecord], source: str | None = None) -> "Ledger":
        """
        Build a ledger from already-merged records, keeping their order.

        Raises:
            MalformedAmountError: If an amount cannot be parsed
            DuplicateAccountError: If an address appears twice
        """
        entries = [
            AccountBalance(
                address=record.address,
                amount=parse_amount(record.amount, address=record.address, source=source),
            )
            for record in records
        ]
        return cls(entries)

    @property
    def entries(self) -> tuple[AccountBalance, ...]:
        return self._entries

    @property
    def addresses(self) -> list[str]:
        return [entry.address for entry in self._entries]

    @property
    def total(self) -> int:
        """Sum of all amounts."""
        return sum(entry.amount for entry in self._entries)

    def _lookup(self, address: object) -> int | None:
        try:
            key = canonical_address(address)
        except EncodingError:
            # Not a 20-byte account id, so it cannot be in the ledger
            return None
        return self._index.get(key)

    def get(self, address: str) -> AccountBalance | None:
        i = self._lookup(address)
        return None if i is None else self._entries[i]

    def index_of(self, address: str) -> int:
        """Position of an address in ledger order, or -1."""
        i = self._lookup(address)
        return -1 if i is None else i

    def to_mapping(self) -> dict[str, int]:
        return {entry.address: entry.amount for entry in self._entries}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[AccountBalance]:
        return iter(self._entries)

    def __contains__(self, address: object) -> bool:
        return self._lookup(address) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ledger):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"Ledger(accounts={len(self)}, total={self.total})"


@dataclass(frozen=True)
class AggregationStats:
    """
    Audit statistics of one aggregation run.

    Attributes:
        primary_count: Records read from the primary source
        secondary_count: Records read from the secondary source
        updated: Secondary records added onto an existing entry
        added: Secondary records that created a new entry
        primary_total: Sum of primary amounts
        secondary_total: Sum of secondary amounts
        ledger_total: Sum of the resulting ledger
    """
    primary_count: int = 0
    secondary_count: int = 0
    updated: int = 0
    added: int = 0
    primary_total: int = 0
    secondary_total: int = 0
    ledger_total: int = 0

    @property
    def source_total(self) -> int:
        return self.primary_total + self.secondary_total

    @property
    def conserved(self) -> bool:
        """True when no value was lost or fabricated by the merge."""
        return self.ledger_total == self.source_total


@dataclass(frozen=True)
class AggregationResult:
    """Aggregated ledger plus the statistics of the run."""
    ledger: Ledger
    stats: AggregationStats


def aggregate(
    primary: Sequence[RawRecord],
    secondary: Sequence[RawRecord],
) -> AggregationResult:
    """
    Merge two record sequences into one ledger.

    Args:
        primary: Records of the primary source (no repeated addresses)
        secondary: Records of the secondary source (no repeated addresses)

    Returns:
        AggregationResult with the ledger sorted by amount descending

    Raises:
        MalformedAmountError: If an amount is not a non-negative integer
        DuplicateAccountError: If one source repeats an address
    """
    balances: dict[str, int] = {}
    primary_total = 0

    for i, record in enumerate(primary):
        amount = parse_amount(record.amount, address=record.address, source=PRIMARY)
        if record.address in balances:
            raise DuplicateAccountError(record.address, source=PRIMARY, index=i)
        balances[record.address] = amount
        primary_total += amount

    logger.info("Loaded %d primary accounts", len(balances))

    seen_secondary: set[str] = set()
    secondary_total = 0
    updated = 0
    added = 0

    for i, record in enumerate(secondary):
        amount = parse_amount(record.amount, address=record.address, source=SECONDARY)
        if record.address in seen_secondary:
            raise DuplicateAccountError(record.address, source=SECONDARY, index=i)
        seen_secondary.add(record.address)
        secondary_total += amount

        if record.address in balances:
            balances[record.address] += amount
            updated += 1
        else:
            balances[record.address] = amount
            added += 1

    logger.info(
        "Updated balances for %d addresses and found %d new addresses",
        updated, added,
    )

    # dict preserves insertion order and sorted() is stable, so ties keep merge order
    ordered = sorted(balances.items(), key=lambda item: item[1], reverse=True)
    ledger = Ledger(AccountBalance(address=address, amount=amount) for address, amount in ordered)

    stats = AggregationStats(
        primary_count=len(primary),
        secondary_count=len(secondary),
        updated=updated,
        added=added,
        primary_total=primary_total,
        secondary_total=secondary_total,
        ledger_total=ledger.total,
    )

    if not stats.conserved:
        logger.warning(
            "Conservation mismatch: ledger total %d != source total %d",
            stats.ledger_total, stats.source_total,
        )

    return AggregationResult(ledger=ledger, stats=stats)


__all__ = [
    "Ledger",
    "AggregationStats",
    "AggregationResult",
    "aggregate",
]
