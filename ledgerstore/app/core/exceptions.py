"""
Custom exceptions for consistent error reporting.

Provides standardized error codes for the failures callers are expected
to branch on. Engine I/O errors are not wrapped and propagate unchanged.
"""

from typing import Any, Dict


class LedgerStoreError(Exception):
    """Base ledger store exception."""

    def __init__(self, message: str, error_code: str, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


class NotInitializedError(LedgerStoreError):
    """Raised when storage is accessed before the database is ready."""

    def __init__(self, message: str = "Database not initialized. Call initialize() first."):
        super().__init__(
            message=message,
            error_code="ERR_DB_001"
        )


class UnknownCurrencyError(LedgerStoreError):
    """Raised when a currency code is not in the currency registry."""

    def __init__(self, currency_code: Any):
        super().__init__(
            message=f"Unknown currency code: {currency_code}",
            error_code="ERR_CURRENCY_001",
            details={"currency": currency_code}
        )
        self.currency_code = currency_code


class SnapshotError(LedgerStoreError):
    """Raised when a database snapshot cannot be decoded or applied."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_SNAPSHOT_001",
            details=details
        )


class ReferentialIntegrityError(LedgerStoreError):
    """Raised when a restricted delete would leave dangling references."""

    def __init__(self, resource: str, resource_id: Any, references: Dict[str, int]):
        summary = ", ".join(f"{count} {name}" for name, count in references.items())
        super().__init__(
            message=f"{resource} with ID {resource_id} is still referenced by {summary}",
            error_code="ERR_REF_001",
            details={"resource": resource, "id": resource_id, "references": references}
        )
