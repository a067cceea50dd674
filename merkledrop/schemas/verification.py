"""
Schemas - Verification Results
File: verification.py

Purpose: Standard result format for audit and verification steps.
Snapshot audits report through these models instead of raising, so
advisory mismatches (conservation, authority totals) stay non-fatal.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .errors import MerkledropError


# Severity levels for checks
CheckSeverity = Literal["info", "warn", "error"]


class CheckResult(BaseModel):
    """
    Result of a single verification check.

    Checks are atomic verification steps that can pass or fail.
    """

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(
        ...,
        description="Unique identifier for this check",
        min_length=1,
    )
    ok: bool = Field(
        ...,
        description="Whether the check passed",
    )
    severity: CheckSeverity = Field(
        ...,
        description="Severity level of this check",
    )
    message: str = Field(
        ...,
        description="Human-readable message describing the result",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional details about the check",
    )

    @property
    def is_error(self) -> bool:
        """Check if this is an error-level failure."""
        return not self.ok and self.severity == "error"

    @property
    def is_warning(self) -> bool:
        """Check if this is a warning."""
        return self.severity == "warn"

    @classmethod
    def passed(
        cls,
        check_id: str,
        message: str = "Check passed",
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """Create a passed check result."""
        return cls(
            check_id=check_id,
            ok=True,
            severity="info",
            message=message,
            details=details or {},
        )

    @classmethod
    def warning(
        cls,
        check_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """Create a warning check result."""
        return cls(
            check_id=check_id,
            ok=True,  # Warnings don't fail the check
            severity="warn",
            message=message,
            details=details or {},
        )

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """Create a failed check result."""
        return cls(
            check_id=check_id,
            ok=False,
            severity="error",
            message=message,
            details=details or {},
        )


class VerificationResult(BaseModel):
    """
    Complete result of a verification process.

    Aggregates individual checks; ``ok`` is False as soon as one
    error-level check fails.
    """

    model_config = ConfigDict(extra="forbid")

    ok: bool = Field(
        ...,
        description="Overall verification success",
    )
    checks: list[CheckResult] = Field(
        default_factory=list,
        description="Individual check results",
    )
    error: MerkledropError | None = Field(
        default=None,
        description="Error details if verification encountered an exception",
    )

    @property
    def has_errors(self) -> bool:
        """Check if any checks failed with error severity."""
        return any(check.is_error for check in self.checks)

    @property
    def has_warnings(self) -> bool:
        """Check if any checks produced warnings."""
        return any(check.is_warning for check in self.checks)

    @property
    def error_count(self) -> int:
        return sum(1 for check in self.checks if check.is_error)

    @property
    def warning_count(self) -> int:
        return sum(1 for check in self.checks if check.is_warning)

    def get_failed_checks(self) -> list[CheckResult]:
        """Get all failed checks."""
        return [check for check in self.checks if not check.ok]

    def get_check(self, check_id: str) -> CheckResult | None:
        """Look up a check by id."""
        for check in self.checks:
            if check.check_id == check_id:
                return check
        return None

    @classmethod
    def success(cls, checks: list[CheckResult] | None = None) -> "VerificationResult":
        """Create a successful verification result."""
        return cls(ok=True, checks=checks or [])

    @classmethod
    def from_checks(cls, checks: list[CheckResult]) -> "VerificationResult":
        """Create a result whose status follows the given checks."""
        return cls(ok=all(check.ok for check in checks), checks=list(checks))

    @classmethod
    def from_error(cls, error: MerkledropError) -> "VerificationResult":
        """Create a verification result from an error."""
        return cls(ok=False, checks=[], error=error)

    def add_check(self, check: CheckResult) -> None:
        """Add a check result."""
        self.checks.append(check)
        if not check.ok:
            self.ok = False
