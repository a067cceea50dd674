"""
Schemas - Error Taxonomy
File: errors.py

Purpose: Standard error taxonomy across the snapshot and commitment engine.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the engine."""

    # Ledger aggregation errors
    MALFORMED_AMOUNT = "MALFORMED_AMOUNT"
    DUPLICATE_ACCOUNT = "DUPLICATE_ACCOUNT"
    CONSERVATION_MISMATCH = "CONSERVATION_MISMATCH"
    AUTHORITY_MISMATCH = "AUTHORITY_MISMATCH"

    # Encoding errors
    ENCODING_ERROR = "ENCODING_ERROR"

    # Merkle & commitment errors
    EMPTY_TREE = "EMPTY_TREE"
    LEAF_NOT_FOUND = "LEAF_NOT_FOUND"
    MALFORMED_PROOF = "MALFORMED_PROOF"

    # Collaborator errors
    LEDGER_SOURCE_ERROR = "LEDGER_SOURCE_ERROR"
    LEDGER_STORAGE_ERROR = "LEDGER_STORAGE_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class MerkledropError(BaseModel):
    """
    Base error model for structured error communication.

    Used for reporting errors without raising, e.g. in CLI JSON output.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.MALFORMED_AMOUNT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "MerkledropException":
        """Convert this error model to a raised exception."""
        return MerkledropException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkledropException(Exception):
    """
    Base exception for all snapshot and commitment errors.

    Carries structured error information and can be converted
    to/from MerkledropError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLEDROP_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkledropError:
        """Convert this exception to a MerkledropError model."""
        return MerkledropError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class MalformedAmountError(MerkledropException):
    """Raised when a raw amount is not a non-negative base-10 integer."""

    def __init__(
        self,
        message: str,
        address: str | None = None,
        raw_amount: Any = None,
        source: str | None = None,
    ) -> None:
        details: dict[str, Any] = {"raw_amount": repr(raw_amount)}
        if address:
            details["address"] = address
        if source:
            details["source"] = source
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_AMOUNT,
            details=details,
        )


class DuplicateAccountError(MerkledropException):
    """Raised when one source lists the same account more than once."""

    def __init__(
        self,
        address: str,
        source: str | None = None,
        index: int | None = None,
    ) -> None:
        details: dict[str, Any] = {"address": address}
        if source:
            details["source"] = source
        if index is not None:
            details["index"] = index
        where = f" in {source} records" if source else ""
        super().__init__(
            message=f"Duplicate account {address}{where}",
            code=ErrorCodes.DUPLICATE_ACCOUNT,
            details=details,
        )
        self.address = address


class EncodingError(MerkledropException):
    """Raised when an account id or amount cannot be packed into a leaf."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.ENCODING_ERROR,
            details=details,
        )


class EmptyTreeError(MerkledropException):
    """Raised when a Merkle tree is built from zero leaves."""

    def __init__(self, message: str = "Cannot build a Merkle tree without leaves") -> None:
        super().__init__(message=message, code=ErrorCodes.EMPTY_TREE)


class LeafNotFoundError(MerkledropException):
    """Raised when a proof is requested for a leaf or account not in the tree."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.LEAF_NOT_FOUND,
            details=details,
        )


class MalformedProofError(MerkledropException):
    """Raised when a leaf, proof entry or root is not a 32-byte hash."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PROOF,
            details=details,
        )


class LedgerSourceError(MerkledropException):
    """
    Raised when a ledger source cannot deliver its pages.

    Retryable by default (transport and I/O failures); pass
    ``retryable=False`` for data the source will keep serving unchanged.
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = True,
    ) -> None:
        full_details = details or {}
        if source:
            full_details["source"] = source
        super().__init__(
            message=message,
            code=ErrorCodes.LEDGER_SOURCE_ERROR,
            details=full_details,
            retryable=retryable,
        )


class LedgerStorageError(MerkledropException):
    """Raised when a persisted ledger cannot be read or written."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if path:
            full_details["path"] = path
        super().__init__(
            message=message,
            code=ErrorCodes.LEDGER_STORAGE_ERROR,
            details=full_details,
        )
