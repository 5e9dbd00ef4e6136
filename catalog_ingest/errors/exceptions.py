"""Custom exception hierarchy for catalog ingestion errors.

Call-level failures (UnsupportedFormatError, ParserError) propagate to the
caller. Row- and batch-level failures are caught inside the pipeline and
folded into the ingestion summary.
"""
from typing import Any


class CatalogIngestError(Exception):
    """Base exception for all catalog ingestion errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UnsupportedFormatError(CatalogIngestError):
    """Raised when a file extension has no registered parser."""
    pass


class ParserError(CatalogIngestError):
    """Raised when an input file cannot be parsed at all."""
    pass


class RowRejected(CatalogIngestError):
    """Raised for rows without a business key or name.

    These are banner or blank rows; parsers skip them silently.
    """
    pass


class RowParseError(CatalogIngestError):
    """Raised for a malformed row that is reported in the summary."""
    pass


class BatchTransactionError(CatalogIngestError):
    """Raised when a single batch transaction fails."""
    pass


class DatabaseError(CatalogIngestError):
    """Raised when database lifecycle operations fail."""
    pass
