"""Error handling module."""
from catalog_ingest.errors.exceptions import (
    CatalogIngestError,
    UnsupportedFormatError,
    ParserError,
    RowRejected,
    RowParseError,
    BatchTransactionError,
    DatabaseError,
)

__all__ = [
    "CatalogIngestError",
    "UnsupportedFormatError",
    "ParserError",
    "RowRejected",
    "RowParseError",
    "BatchTransactionError",
    "DatabaseError",
]
