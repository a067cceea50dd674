"""
CLI Snapshot Command

Collect records from both sources, merge them, and write the ledger.

Usage:
    merkledrop snapshot [--primary FILE] [--secondary FILE] [--out FILE] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from merkledrop.ledger.aggregator import aggregate
from merkledrop.ledger.audit import check_conservation
from merkledrop.ledger.sources import FileLedgerSource, collect_records
from merkledrop.ledger.storage import save_ledger
from merkledrop.schemas.errors import MerkledropException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


@dataclass
class SnapshotSummary:
    """Summary of a snapshot run for CLI output."""
    out: str = ""
    accounts: int = 0
    total: str = "0"
    primary_records: int = 0
    secondary_records: int = 0
    updated: int = 0
    added: int = 0
    conserved: bool = True
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["warnings"]:
            del d["warnings"]
        return d


def print_summary_human(summary: SnapshotSummary) -> None:
    print(f"snapshot: {summary.out}")
    print(f"accounts: {summary.accounts}")
    print(f"total: {summary.total}")
    print(f"primary_records: {summary.primary_records}")
    print(f"secondary_records: {summary.secondary_records}")
    print(f"updated: {summary.updated}")
    print(f"added: {summary.added}")
    print(f"conserved: {str(summary.conserved).lower()}")
    for warning in summary.warnings:
        print(f"  ! {warning}")


def snapshot_cmd(args: Namespace) -> int:
    """
    Execute the snapshot command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config = args.cli_config.snapshot
    primary_id = config.primary_source
    secondary_id = config.secondary_source

    primary_path = args.primary or config.sources.get(primary_id)
    secondary_path = args.secondary or config.sources.get(secondary_id)
    if not primary_path or not secondary_path:
        print(
            "Error: both --primary and --secondary record files are required "
            "(or configure snapshot.sources)",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    out = args.out or config.path
    source = FileLedgerSource(
        {primary_id: primary_path, secondary_id: secondary_path},
        page_size=config.page_size,
    )

    try:
        logger.info("Fetching %s records...", primary_id)
        primary = collect_records(source, primary_id)
        logger.info("Fetching %s records and merging datasets...", secondary_id)
        secondary = collect_records(source, secondary_id)
        result = aggregate(primary, secondary)
        save_ledger(result.ledger, out)
    except MerkledropException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    conservation = check_conservation(result.stats)
    summary = SnapshotSummary(
        out=str(out),
        accounts=len(result.ledger),
        total=str(result.ledger.total),
        primary_records=result.stats.primary_count,
        secondary_records=result.stats.secondary_count,
        updated=result.stats.updated,
        added=result.stats.added,
        conserved=result.stats.conserved,
        warnings=[conservation.message] if conservation.is_warning else [],
    )

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS
