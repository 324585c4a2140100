"""Custom exception classes for the expense category backfill.

Each exception maps to an error code defined in errors.py. Records that
cannot be matched are not errors; they are tallied as skips in the run
summary.
"""

from typing import Any


class ReconciliationError(Exception):
    """Base exception for all backfill errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "RECON_002")
        details: Additional context about the error
        http_status: HTTP status code to return (default: 500)
    """

    def __init__(
        self,
        error_code: str,
        details: dict[str, Any] | None = None,
        http_status: int = 500,
    ):
        self.error_code = error_code
        self.details = details or {}
        self.http_status = http_status
        super().__init__(error_code)


class InputError(ReconciliationError):
    """Raised when the trip identifier is missing.

    No store is contacted. Maps to RECON_001.
    """

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__("RECON_001", details, http_status=400)


class LoadError(ReconciliationError):
    """Raised when one of the initial reads fails.

    The run is aborted before matching and nothing is mutated. The
    ``source`` names the failed load and ``reason`` carries the original
    error message verbatim. Maps to RECON_002.
    """

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__("RECON_002", {"source": source, "reason": reason})


class BatchUpdateError(ReconciliationError):
    """Raised when every attempted category update failed.

    Maps to RECON_003.
    """

    def __init__(self, attempted: int, failures: list[dict[str, Any]]):
        self.attempted = attempted
        self.failures = failures
        super().__init__("RECON_003", {"attempted": attempted, "failures": failures})


class ExpenseNotFoundError(Exception):
    """Raised by a store when a category update matched no expense row."""
