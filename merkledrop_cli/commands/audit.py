"""
CLI Audit Command

Check a persisted snapshot for duplicates and malformed amounts, print its
totals, and cross-check the total against authoritative figures.

Usage:
    merkledrop audit [SNAPSHOT] [--authority NAME=VALUE ...] [--cap-divisor N] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from decimal import Decimal

from eth_utils import from_wei

from merkledrop.ledger.audit import (
    CompositeAuthority,
    SnapshotAudit,
    StaticAuthority,
    audit_snapshot,
)
from merkledrop.ledger.storage import load_records
from merkledrop.schemas.errors import MerkledropException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def parse_authorities(values: list[str]) -> dict[str, int]:
    """
    Parse ``NAME=VALUE`` pairs (a bare VALUE gets a positional name).

    Raises:
        ValueError: If a value is not an integer
    """
    totals: dict[str, int] = {}
    for i, item in enumerate(values):
        name, sep, value = item.partition("=")
        if not sep:
            name, value = f"authority{i}", item
        totals[name.strip()] = int(value.strip())
    return totals


def format_units(amount: int) -> str:
    """Amount in 18-decimal token units, e.g. 25 * 10**18 -> "25"."""
    return format(Decimal(from_wei(amount, "ether")), "f")


def print_audit_human(path: str, audit: SnapshotAudit, breakdown: dict[str, int]) -> None:
    print(f"snapshot: {path}")
    print(f"accounts: {audit.accounts}")
    print(f"unique_accounts: {audit.unique_accounts}")
    print(f"total: {audit.total} ({format_units(audit.total)} tokens)")
    print(f"capped_total: {audit.capped_total} ({format_units(audit.capped_total)} tokens)")
    if audit.authority_total is not None:
        parts = " | ".join(f"{value} ({name})" for name, value in breakdown.items())
        print(f"authority: {parts} | {audit.authority_total} (TOTAL)")
    print(f"ok: {str(audit.ok).lower()}")
    for check in audit.result.checks:
        if check.is_error:
            status = "✗"
        elif check.is_warning:
            status = "!"
        else:
            status = "✓"
        print(f"  {status} [{check.check_id}] {check.message}")


def audit_cmd(args: Namespace) -> int:
    """
    Execute the audit command.

    Returns:
        Exit code (2 when an error-level check fails)
    """
    config = args.cli_config
    path = args.snapshot or config.snapshot.path
    cap_divisor = args.cap_divisor or config.audit.cap_divisor

    try:
        totals = dict(config.audit.authority_totals)
        totals.update(parse_authorities(args.authority or []))
    except ValueError as e:
        print(f"Error: invalid --authority value: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    authority = None
    if totals:
        authority = CompositeAuthority(
            StaticAuthority(total=value, name=name) for name, value in totals.items()
        )

    try:
        records = load_records(path)
        audit = audit_snapshot(records, authority=authority, cap_divisor=cap_divisor)
    except MerkledropException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps(audit.to_dict(), indent=2))
    else:
        print_audit_human(str(path), audit, authority.breakdown() if authority else {})

    if audit.ok:
        logger.info("Snapshot audit passed")
        return EXIT_SUCCESS
    logger.warning("Snapshot audit failed")
    return EXIT_VERIFICATION_FAILED
