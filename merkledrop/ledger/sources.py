"""
Ledger Sources

A ledger source hands out raw balance records page by page. Pagination ends
with an explicit ``done`` marker so a finished source is never confused with
a failing one.

The remote query protocol is not implemented here; FileLedgerSource serves
pages from local JSON exports (one array of records per source id).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import ValidationError

from merkledrop.schemas.errors import LedgerSourceError
from merkledrop.schemas.ledger import RawRecord


logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000


@dataclass(frozen=True)
class RecordPage:
    """One page of records; ``done`` marks the last page."""
    records: list[RawRecord] = field(default_factory=list)
    done: bool = False


@runtime_checkable
class LedgerSource(Protocol):
    """Anything that can serve paginated raw records."""

    def fetch_page(self, source_id: str, offset: int) -> RecordPage:
        ...


def collect_records(source: LedgerSource, source_id: str) -> list[RawRecord]:
    """
    Drain every page of a source.

    Args:
        source: Ledger source to read from
        source_id: Which feed of the source to read

    Returns:
        All records in arrival order

    Raises:
        LedgerSourceError: If a page is empty but not marked as the last one
    """
    records: list[RawRecord] = []
    offset = 0
    while True:
        page = source.fetch_page(source_id, offset)
        records.extend(page.records)
        logger.debug(
            "Fetched %d records from %s at offset %d", len(page.records), source_id, offset
        )
        if page.done:
            break
        if not page.records:
            raise LedgerSourceError(
                f"Source returned an empty page without an end marker at offset {offset}",
                source=source_id,
                details={"offset": offset},
            )
        offset += len(page.records)

    logger.info("Collected %d records from %s", len(records), source_id)
    return records


class FileLedgerSource:
    """
    Ledger source backed by local JSON files.

    Each file holds a JSON array of record objects (``address``/``amount`` or
    the subgraph ``id``/``amountOwed`` shape).

    Usage:
        source = FileLedgerSource({"mainnet": "mainnet.json", "xdai": "xdai.json"})
        records = collect_records(source, "mainnet")
    """

    def __init__(
        self,
        paths: dict[str, str | Path],
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.paths = {name: Path(path) for name, path in paths.items()}
        self.page_size = page_size
        self._cache: dict[str, list[RawRecord]] = {}

    def _load(self, source_id: str) -> list[RawRecord]:
        if source_id in self._cache:
            return self._cache[source_id]

        path = self.paths.get(source_id)
        if path is None:
            raise LedgerSourceError(
                f"Unknown source: {source_id}", source=source_id, retryable=False
            )

        try:
            text = path.read_text()
        except OSError as e:
            raise LedgerSourceError(
                f"Cannot read {path}: {e}", source=source_id, details={"path": str(path)}
            ) from e

        # Decode and validation failures repeat on every attempt
        try:
            data: Any = json.loads(text)
        except json.JSONDecodeError as e:
            raise LedgerSourceError(
                f"Cannot decode {path}: {e}",
                source=source_id,
                details={"path": str(path)},
                retryable=False,
            ) from e

        if not isinstance(data, list):
            raise LedgerSourceError(
                f"{path} must contain a JSON array of records",
                source=source_id,
                details={"path": str(path)},
                retryable=False,
            )

        try:
            records = [RawRecord.model_validate(item) for item in data]
        except ValidationError as e:
            raise LedgerSourceError(
                f"Invalid record in {path}: {e.errors()[0]['msg']}",
                source=source_id,
                details={"path": str(path)},
                retryable=False,
            ) from e

        self._cache[source_id] = records
        return records

    def fetch_page(self, source_id: str, offset: int) -> RecordPage:
        records = self._load(source_id)
        page = records[offset:offset + self.page_size]
        return RecordPage(records=page, done=offset + self.page_size >= len(records))


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "RecordPage",
    "LedgerSource",
    "collect_records",
    "FileLedgerSource",
]
