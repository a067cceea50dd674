"""
Snapshot Audit

Advisory checks run over an aggregated or persisted ledger:
- unique_accounts: no address listed twice (error)
- amounts_valid: every amount is a non-negative integer (error)
- conservation: merged total equals the sum of both sources (warning)
- authority_total: ledger total equals the authoritative locked supply (warning)

Conservation and authority mismatches never fail the audit: the sources and
the authority are advisory, so mismatches are logged and reported as
warning-level checks.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Protocol, Sequence, runtime_checkable

from merkledrop.ledger.aggregator import AggregationStats
from merkledrop.schemas.errors import ErrorCodes, MalformedAmountError
from merkledrop.schemas.ledger import RawRecord, parse_amount
from merkledrop.schemas.verification import CheckResult, VerificationResult


logger = logging.getLogger(__name__)

# Divisor applied per account for the post-redenomination ("new cap") total
DEFAULT_CAP_DIVISOR = 10_000


@runtime_checkable
class Authority(Protocol):
    """Authoritative figure for the total locked amount."""

    def total_locked(self) -> int:
        ...


@dataclass(frozen=True)
class StaticAuthority:
    """Authority with a fixed, externally obtained total."""
    total: int
    name: str = "static"

    def total_locked(self) -> int:
        return self.total


class CompositeAuthority:
    """Sums the totals of several authorities (one per chain)."""

    def __init__(self, authorities: Iterable[Authority]) -> None:
        self.authorities = list(authorities)

    def breakdown(self) -> dict[str, int]:
        """Total per authority, keyed by its ``name`` (or position)."""
        return {
            getattr(authority, "name", str(i)): authority.total_locked()
            for i, authority in enumerate(self.authorities)
        }

    def total_locked(self) -> int:
        return sum(authority.total_locked() for authority in self.authorities)


def check_conservation(stats: AggregationStats) -> CheckResult:
    """Compare the merged total with the sum of both sources."""
    details = {
        "ledger_total": str(stats.ledger_total),
        "primary_total": str(stats.primary_total),
        "secondary_total": str(stats.secondary_total),
    }
    if stats.conserved:
        return CheckResult.passed(
            "conservation", "Ledger total equals the sum of both sources", details
        )
    logger.warning(
        "Conservation mismatch: ledger %d != sources %d",
        stats.ledger_total, stats.source_total,
    )
    details["code"] = ErrorCodes.CONSERVATION_MISMATCH
    return CheckResult.warning(
        "conservation",
        f"Ledger total {stats.ledger_total} differs from source total {stats.source_total}",
        details,
    )


def check_unique_accounts(records: Sequence[RawRecord]) -> CheckResult:
    """Report every address that appears more than once."""
    counts = Counter(record.address for record in records)
    duplicates = sorted(address for address, count in counts.items() if count > 1)
    if not duplicates:
        return CheckResult.passed("unique_accounts", f"{len(counts)} unique accounts")
    for address in duplicates:
        logger.warning("DUPLICATE account %s (%d entries)", address, counts[address])
    return CheckResult.failed(
        "unique_accounts",
        f"{len(duplicates)} duplicate account(s)",
        {"code": ErrorCodes.DUPLICATE_ACCOUNT, "duplicates": duplicates},
    )


def check_authority_total(total: int, authority: Authority) -> CheckResult:
    """Compare a ledger total with the authority's locked total."""
    expected = authority.total_locked()
    details = {"ledger_total": str(total), "authority_total": str(expected)}
    if total == expected:
        return CheckResult.passed("authority_total", "Ledger total matches authority", details)
    logger.warning("Authority mismatch: ledger %d != authority %d", total, expected)
    details["code"] = ErrorCodes.AUTHORITY_MISMATCH
    return CheckResult.warning(
        "authority_total",
        f"Ledger total {total} differs from authority total {expected}",
        details,
    )


@dataclass
class SnapshotAudit:
    """Figures and checks produced by audit_snapshot()."""
    accounts: int = 0
    unique_accounts: int = 0
    total: int = 0
    capped_total: int = 0
    authority_total: int | None = None
    result: VerificationResult = field(default_factory=VerificationResult.success)

    @property
    def ok(self) -> bool:
        return self.result.ok

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "accounts": self.accounts,
            "unique_accounts": self.unique_accounts,
            "total": str(self.total),
            "capped_total": str(self.capped_total),
            "authority_total": None if self.authority_total is None else str(self.authority_total),
            "checks": [check.model_dump() for check in self.result.checks],
        }


def audit_snapshot(
    records: Sequence[RawRecord],
    authority: Authority | None = None,
    cap_divisor: int = DEFAULT_CAP_DIVISOR,
    stats: AggregationStats | None = None,
) -> SnapshotAudit:
    """
    Audit a snapshot given as raw records (duplicates are reported, not merged).

    Args:
        records: Snapshot records, e.g. from storage.load_records()
        authority: Optional authoritative total to cross-check against
        cap_divisor: Per-account divisor for the capped total
        stats: Aggregation statistics, when the snapshot was just built

    Returns:
        SnapshotAudit with totals and a VerificationResult
    """
    if cap_divisor <= 0:
        raise ValueError(f"cap_divisor must be positive, got {cap_divisor}")

    checks: list[CheckResult] = [check_unique_accounts(records)]

    total = 0
    capped_total = 0
    malformed: list[str] = []
    for record in records:
        try:
            amount = parse_amount(record.amount, address=record.address)
        except MalformedAmountError:
            malformed.append(record.address)
            continue
        total += amount
        capped_total += amount // cap_divisor

    if malformed:
        checks.append(CheckResult.failed(
            "amounts_valid",
            f"{len(malformed)} record(s) with malformed amounts",
            {"code": ErrorCodes.MALFORMED_AMOUNT, "addresses": malformed},
        ))
    else:
        checks.append(CheckResult.passed("amounts_valid", "All amounts are valid integers"))

    if stats is not None:
        checks.append(check_conservation(stats))

    authority_total = None
    if authority is not None:
        check = check_authority_total(total, authority)
        authority_total = int(check.details["authority_total"])
        checks.append(check)

    audit = SnapshotAudit(
        accounts=len(records),
        unique_accounts=len({record.address for record in records}),
        total=total,
        capped_total=capped_total,
        authority_total=authority_total,
        result=VerificationResult.from_checks(checks),
    )

    logger.info(
        "Audited %d accounts: total=%d capped_total=%d ok=%s",
        audit.accounts, audit.total, audit.capped_total, audit.ok,
    )
    return audit


__all__ = [
    "DEFAULT_CAP_DIVISOR",
    "Authority",
    "StaticAuthority",
    "CompositeAuthority",
    "check_conservation",
    "check_unique_accounts",
    "check_authority_total",
    "SnapshotAudit",
    "audit_snapshot",
]
