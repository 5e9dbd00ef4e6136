"""Pydantic models for records, parse results and summaries."""
from catalog_ingest.models.product_record import (
    ProductRecord,
    UNCATEGORIZED,
    BUSINESS_KEY_MAX,
    NAME_MAX,
    CATEGORY_MAX,
    REVIEW_TITLE_MAX,
    REVIEW_BODY_MAX,
    LINK_MAX,
)
from catalog_ingest.models.ingestion import (
    UploadedArtifact,
    SeedArtifact,
    IngestionInput,
    ParseIssue,
    ParseResult,
    BatchFailure,
    PersistOutcome,
    SummaryError,
    IngestionSummary,
)

__all__ = [
    "ProductRecord",
    "UNCATEGORIZED",
    "BUSINESS_KEY_MAX",
    "NAME_MAX",
    "CATEGORY_MAX",
    "REVIEW_TITLE_MAX",
    "REVIEW_BODY_MAX",
    "LINK_MAX",
    "UploadedArtifact",
    "SeedArtifact",
    "IngestionInput",
    "ParseIssue",
    "ParseResult",
    "BatchFailure",
    "PersistOutcome",
    "SummaryError",
    "IngestionSummary",
]
