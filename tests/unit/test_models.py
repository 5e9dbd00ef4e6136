"""Unit tests for pydantic models."""
from pathlib import Path

import pytest
from pydantic import ValidationError

from catalog_ingest.models import (
    IngestionSummary,
    ParseIssue,
    ParseResult,
    ProductRecord,
    SeedArtifact,
    UploadedArtifact,
)
from tests.helpers import make_record


class TestProductRecord:
    """Test ProductRecord validation."""

    def test_defaults(self):
        record = ProductRecord(business_key="K1", name="Kettle")

        assert record.category == "Uncategorized"
        assert record.rating is None

    def test_empty_key_rejected(self):
        with pytest.raises(ValidationError):
            ProductRecord(business_key="", name="Kettle")

    def test_over_long_key_rejected(self):
        with pytest.raises(ValidationError):
            ProductRecord(business_key="K" * 41, name="Kettle")

    def test_frozen(self):
        record = make_record("K1")

        with pytest.raises(ValidationError):
            record.name = "changed"

    def test_to_row_uses_column_names(self):
        row = make_record("K1").to_row()

        assert set(row) == {
            "business_key",
            "name",
            "category",
            "price_discounted",
            "price_original",
            "discount_percent",
            "rating",
            "rating_count",
            "review_title",
            "review_body",
            "image_ref",
            "external_link",
        }


class TestArtifacts:
    """Test ingestion input variants."""

    def test_upload_extension_prefers_original_filename(self):
        artifact = UploadedArtifact(path=Path("/uploads/3f2a"), filename="Reviews.XLSX")

        assert artifact.extension == ".xlsx"
        assert artifact.delete_after_ingest is True

    def test_upload_extension_from_path(self):
        assert UploadedArtifact(path=Path("/uploads/reviews.csv")).extension == ".csv"

    def test_seed_is_never_deleted(self):
        artifact = SeedArtifact(path=Path("data/amazon.csv"))

        assert artifact.delete_after_ingest is False
        assert artifact.extension == ".csv"


class TestParseResult:
    def test_total_seen_excludes_skipped_rows(self):
        result = ParseResult(
            records=[make_record("A"), make_record("B")],
            errors=[ParseIssue(row_identifier="row 4", reason="bad")],
            skipped_rows=3,
        )

        assert result.total_seen == 3


class TestIngestionSummary:
    def test_serializes_for_http_response(self):
        summary = IngestionSummary(total_seen=2, inserted=1, skipped=1)

        assert summary.model_dump(mode="json") == {
            "total_seen": 2,
            "inserted": 1,
            "skipped": 1,
            "failed": 0,
            "errors": [],
        }

    def test_failed_field_documents_parse_errors(self):
        """Verify the response schema says failed includes parse errors."""
        description = IngestionSummary.model_json_schema()["properties"]["failed"]["description"]

        assert "parse errors" in description
        assert "rolled-back batches" in description
