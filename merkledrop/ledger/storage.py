"""
Ledger Storage

Persisted ledger format (``snapshot.json``): a JSON array, in ledger order,
of ``{"address": "<0x hex>", "amount": "<decimal string>"}`` objects.
Amounts are written as strings so no JSON reader turns them into floats.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from merkledrop.ledger.aggregator import Ledger
from merkledrop.schemas.errors import LedgerStorageError
from merkledrop.schemas.ledger import RawRecord


logger = logging.getLogger(__name__)


def save_ledger(ledger: Ledger, path: str | Path) -> Path:
    """
    Write a ledger to disk.

    Returns:
        The path written
    """
    path = Path(path)
    records = [entry.to_record() for entry in ledger]
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(records, indent=2) + "\n")
    except OSError as e:
        raise LedgerStorageError(f"Cannot write ledger: {e}", path=str(path)) from e

    logger.info("Wrote %d accounts to %s", len(records), path)
    return path


def load_records(path: str | Path) -> list[RawRecord]:
    """
    Read a persisted ledger as raw records without merging or deduplicating.

    Used by audits that must see duplicates instead of failing on them.

    Raises:
        LedgerStorageError: If the file is missing, not JSON, or malformed
    """
    path = Path(path)
    try:
        data: Any = json.loads(path.read_text())
    except FileNotFoundError as e:
        raise LedgerStorageError(f"Ledger file not found: {path}", path=str(path)) from e
    except (OSError, json.JSONDecodeError) as e:
        raise LedgerStorageError(f"Cannot read ledger: {e}", path=str(path)) from e

    if not isinstance(data, list):
        raise LedgerStorageError(
            "Ledger file must contain a JSON array of records", path=str(path)
        )

    try:
        return [RawRecord.model_validate(item) for item in data]
    except ValidationError as e:
        raise LedgerStorageError(
            f"Invalid ledger record: {e.errors()[0]['msg']}", path=str(path)
        ) from e


def load_ledger(path: str | Path) -> Ledger:
    """
    Read a persisted ledger, preserving its order.

    Raises:
        LedgerStorageError: If the file cannot be read
        MalformedAmountError: If an amount is not a non-negative integer
        DuplicateAccountError: If an address appears twice
    """
    ledger = Ledger.from_records(load_records(path), source=str(path))
    logger.info("Loaded %d accounts from %s", len(ledger), path)
    return ledger


__all__ = [
    "save_ledger",
    "load_records",
    "load_ledger",
]
