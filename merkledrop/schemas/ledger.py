"""
Schemas - Ledger Records
File: ledger.py

Purpose: Data models for balance records as they move through the engine:
- RawRecord: untrusted record delivered by a ledger source
- AccountBalance: one committed (address, amount) entry of the ledger
- ProofExport: self-contained inclusion proof handed to a claimant

Amounts are arbitrary-precision integers. They are persisted and exported
as decimal strings, never as floats.
"""

import re
from typing import Any

from eth_utils import is_hex_address
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer, field_validator

from .errors import EncodingError, MalformedAmountError


ADDRESS_LENGTH = 20

_DECIMAL_RE = re.compile(r"^[0-9]+$")


def parse_amount(
    raw: Any,
    *,
    address: str | None = None,
    source: str | None = None,
) -> int:
    """
    Parse an untrusted amount into a non-negative integer.

    Accepts Python ints and base-10 digit strings (surrounding whitespace is
    ignored). Signs, decimal points, exponents and floats are rejected.

    Args:
        raw: Amount as received from a source
        address: Account the amount belongs to (for error reporting)
        source: Source name (for error reporting)

    Returns:
        The amount as an int

    Raises:
        MalformedAmountError: If the value is not a non-negative integer
    """
    if isinstance(raw, bool):
        raise MalformedAmountError(
            f"Amount must be an integer, got boolean {raw!r}",
            address=address, raw_amount=raw, source=source,
        )
    if isinstance(raw, int):
        if raw < 0:
            raise MalformedAmountError(
                f"Amount must be non-negative, got {raw}",
                address=address, raw_amount=raw, source=source,
            )
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if not _DECIMAL_RE.match(text):
            raise MalformedAmountError(
                f"Amount is not a non-negative integer: {raw!r}",
                address=address, raw_amount=raw, source=source,
            )
        try:
            return int(text)
        except ValueError as e:
            # int() refuses digit strings above the interpreter's conversion limit
            raise MalformedAmountError(
                f"Amount could not be converted: {e}",
                address=address, raw_amount=raw, source=source,
            ) from e
    raise MalformedAmountError(
        f"Amount must be a decimal string or integer, got {type(raw).__name__}",
        address=address, raw_amount=raw, source=source,
    )


def canonical_address(account_id: Any) -> str:
    """
    Canonical text form of a 20-byte account id: ``0x`` + 40 lowercase hex digits.

    Accepts 20 raw bytes or a hex string with or without the ``0x`` prefix,
    in any case, so every spelling of one account maps to one key.

    Raises:
        EncodingError: If the identifier is not exactly 20 bytes
    """
    if isinstance(account_id, (bytes, bytearray, memoryview)):
        raw = bytes(account_id)
        if len(raw) != ADDRESS_LENGTH:
            raise EncodingError(
                f"Account id must be {ADDRESS_LENGTH} bytes, got {len(raw)}",
                details={"length": len(raw)},
            )
        return "0x" + raw.hex()

    if isinstance(account_id, str):
        text = account_id.strip().lower()
        if not text.startswith("0x"):
            text = "0x" + text
        if not is_hex_address(text):
            raise EncodingError(
                f"Invalid account id: {account_id!r}",
                details={"account_id": account_id},
            )
        return text

    raise EncodingError(
        f"Account id must be bytes or hex string, got {type(account_id).__name__}",
    )


class RawRecord(BaseModel):
    """
    A balance record as delivered by a ledger source.

    The account key is accepted as ``address``, ``id`` or ``account_id``
    and the amount as ``amount`` or ``amountOwed`` (the subgraph shape).
    The address is stored in canonical form. The amount is kept as received
    (ints become decimal strings) until aggregation parses it, so a bad
    amount surfaces as MalformedAmountError there rather than here.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    address: str = Field(
        ...,
        description="Account identifier (canonical 0x-prefixed lowercase hex)",
        min_length=1,
        validation_alias=AliasChoices("address", "id", "account_id", "accountId"),
    )
    amount: Any = Field(
        ...,
        description="Amount as received, normally a decimal string",
        validation_alias=AliasChoices("amount", "amountOwed"),
    )

    @field_validator("address", mode="before")
    @classmethod
    def _normalize_address(cls, v: Any) -> Any:
        return canonical_address(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_as_text(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class AccountBalance(BaseModel):
    """
    One committed entry of the ledger.

    Serializes the amount as a decimal string so JSON output stays exact.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    address: str = Field(
        ...,
        description="Account identifier (canonical 0x-prefixed lowercase hex)",
        min_length=1,
    )
    amount: int = Field(
        ...,
        description="Committed balance",
        ge=0,
    )

    @field_validator("address", mode="before")
    @classmethod
    def _normalize_address(cls, v: Any) -> Any:
        return canonical_address(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, v: Any) -> int:
        return parse_amount(v)

    @field_serializer("amount")
    def _serialize_amount(self, amount: int) -> str:
        return str(amount)

    def to_record(self) -> dict[str, str]:
        """Persisted representation: ``{"address": ..., "amount": "<decimal>"}``."""
        return {"address": self.address, "amount": str(self.amount)}


class ProofExport(BaseModel):
    """
    Inclusion proof for one ledger entry.

    Contains everything a third party needs to check the claim with
    nothing but the sorted-pair verification algorithm.
    """

    model_config = ConfigDict(extra="forbid")

    address: str = Field(..., description="Account identifier")
    amount: str = Field(..., description="Committed balance as a decimal string")
    leaf: str = Field(..., description="0x-prefixed leaf hash")
    proof: list[str] = Field(
        default_factory=list,
        description="0x-prefixed sibling hashes, bottom-up",
    )
    root: str = Field(..., description="0x-prefixed Merkle root")
