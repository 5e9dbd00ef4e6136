"""Pydantic models for ingestion inputs, intermediate results and summaries."""
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from catalog_ingest.models.product_record import ProductRecord


class UploadedArtifact(BaseModel):
    """File received through the upload endpoint.

    The file is transient and is deleted once ingestion finishes.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    filename: str | None = Field(
        default=None, description="Original filename before server-side renaming"
    )

    @property
    def delete_after_ingest(self) -> bool:
        return True

    @property
    def extension(self) -> str:
        return Path(self.filename or self.path.name).suffix.lower()


class SeedArtifact(BaseModel):
    """Operator-supplied dataset path; never deleted."""

    model_config = ConfigDict(frozen=True)

    path: Path

    @property
    def delete_after_ingest(self) -> bool:
        return False

    @property
    def extension(self) -> str:
        return self.path.suffix.lower()


IngestionInput = UploadedArtifact | SeedArtifact


class ParseIssue(BaseModel):
    """A malformed row reported by a parser."""

    row_identifier: str
    reason: str


class ParseResult(BaseModel):
    """Output of a single parser invocation."""

    records: list[ProductRecord] = Field(default_factory=list)
    errors: list[ParseIssue] = Field(default_factory=list)
    skipped_rows: int = Field(
        default=0, description="Rows silently skipped for missing identity fields"
    )

    @property
    def total_seen(self) -> int:
        return len(self.records) + len(self.errors)


class BatchFailure(BaseModel):
    """A batch whose transaction was rolled back."""

    batch_index: int
    size: int
    first_key: str | None = None
    reason: str


class PersistOutcome(BaseModel):
    """Aggregated result of persisting all batches."""

    inserted: int = 0
    skipped_existing: int = 0
    failed: int = 0
    batch_errors: list[BatchFailure] = Field(default_factory=list)


class SummaryError(BaseModel):
    """Caller-visible error entry."""

    kind: Literal["parse", "batch"]
    reference: str
    reason: str


class IngestionSummary(BaseModel):
    """Outcome of one ingestion call, returned to the HTTP layer.

    ``total_seen == inserted + skipped + failed`` always holds; parse errors
    are counted under ``failed`` alongside rows of rolled-back batches.
    """

    total_seen: int = Field(default=0, description="Shaped records plus rows reported as parse errors")
    inserted: int = Field(default=0, description="Rows committed by this call")
    skipped: int = Field(
        default=0, description="In-file duplicates plus keys already in the store"
    )
    failed: int = Field(
        default=0,
        description="Rows of rolled-back batches plus rows reported as parse errors",
    )
    errors: list[SummaryError] = Field(
        default_factory=list, description="First parse and batch errors, capped"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "total_seen": 1465,
                "inserted": 1351,
                "skipped": 114,
                "failed": 0,
                "errors": [],
            }
        }
    }
