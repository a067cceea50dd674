"""
Ledger aggregation, sources, storage and audit.
"""
from .aggregator import (
    Ledger,
    AggregationStats,
    AggregationResult,
    aggregate,
)
from .sources import (
    RecordPage,
    LedgerSource,
    FileLedgerSource,
    collect_records,
)
from .storage import (
    save_ledger,
    load_records,
    load_ledger,
)
from .audit import (
    Authority,
    StaticAuthority,
    CompositeAuthority,
    SnapshotAudit,
    audit_snapshot,
    check_authority_total,
    check_conservation,
    check_unique_accounts,
)

__all__ = [
    "Ledger",
    "AggregationStats",
    "AggregationResult",
    "aggregate",
    "RecordPage",
    "LedgerSource",
    "FileLedgerSource",
    "collect_records",
    "save_ledger",
    "load_records",
    "load_ledger",
    "Authority",
    "StaticAuthority",
    "CompositeAuthority",
    "SnapshotAudit",
    "audit_snapshot",
    "check_authority_total",
    "check_conservation",
    "check_unique_accounts",
]
