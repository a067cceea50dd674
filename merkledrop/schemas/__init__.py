"""
Schemas

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import schema definitions.
"""

# Error models and exceptions
from .errors import (
    DuplicateAccountError,
    EmptyTreeError,
    EncodingError,
    ErrorCodes,
    LeafNotFoundError,
    LedgerSourceError,
    LedgerStorageError,
    MalformedAmountError,
    MalformedProofError,
    MerkledropError,
    MerkledropException,
)

# Ledger records
from .ledger import (
    AccountBalance,
    ProofExport,
    RawRecord,
    canonical_address,
    parse_amount,
)

# Verification results
from .verification import (
    CheckResult,
    CheckSeverity,
    VerificationResult,
)

__all__ = [
    # Errors
    "DuplicateAccountError",
    "EmptyTreeError",
    "EncodingError",
    "ErrorCodes",
    "LeafNotFoundError",
    "LedgerSourceError",
    "LedgerStorageError",
    "MalformedAmountError",
    "MalformedProofError",
    "MerkledropError",
    "MerkledropException",
    # Ledger
    "AccountBalance",
    "ProofExport",
    "RawRecord",
    "canonical_address",
    "parse_amount",
    # Verification
    "CheckResult",
    "CheckSeverity",
    "VerificationResult",
]
