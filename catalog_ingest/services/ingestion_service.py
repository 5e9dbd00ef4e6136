"""
Ingestion Orchestrator
======================

Public entry point of the pipeline:

    parse (by extension) → deduplicate → persist in batches → summarize

Transient uploads are deleted once the call finishes, whatever the
outcome; seed datasets are never deleted.
"""

from catalog_ingest.config import get_logger, get_settings
from catalog_ingest.db.connection import DatabaseManager
from catalog_ingest.db.repositories.products_repo import SqlProductStore
from catalog_ingest.models.ingestion import (
    IngestionInput,
    IngestionSummary,
    ParseResult,
    PersistOutcome,
    SeedArtifact,
    SummaryError,
    UploadedArtifact,
)
from catalog_ingest.parsers import create_parser_for_extension
from catalog_ingest.services.batch_persister import BatchPersister
from catalog_ingest.services.deduplication import deduplicate

logger = get_logger(__name__)


class IngestionService:
    """
    Runs one file through the ingestion pipeline.

    Example:
        service = IngestionService(BatchPersister(SqlProductStore(db)))
        summary = await service.ingest(UploadedArtifact(path=tmp, filename="reviews.xlsx"))
    """

    def __init__(
        self,
        persister: BatchPersister,
        max_reported_errors: int | None = None,
    ) -> None:
        self._persister = persister
        self._max_reported_errors = (
            max_reported_errors
            if max_reported_errors is not None
            else get_settings().max_reported_errors
        )

    async def ingest(self, artifact: IngestionInput) -> IngestionSummary:
        """
        Ingest one file.

        Args:
            artifact: UploadedArtifact (deleted afterwards) or SeedArtifact

        Returns:
            IngestionSummary; returned even when every batch fails

        Raises:
            UnsupportedFormatError: If no parser handles the file extension
            ParserError: If the file cannot be parsed at all
        """
        if not isinstance(artifact, (UploadedArtifact, SeedArtifact)):
            raise TypeError(f"Unsupported ingestion input: {type(artifact).__name__}")

        log = logger.bind(
            file_path=str(artifact.path),
            artifact=type(artifact).__name__,
            extension=artifact.extension,
        )
        log.info("ingestion_started")

        try:
            parser = create_parser_for_extension(artifact.extension)
            parse_result = await parser.parse(artifact.path)

            records, duplicates = deduplicate(parse_result.records)
            outcome = await self._persister.persist(records) if records else PersistOutcome()
        finally:
            self._cleanup(artifact, log)

        summary = self._summarize(parse_result, duplicates, outcome)
        log.info(
            "ingestion_completed",
            total_seen=summary.total_seen,
            inserted=summary.inserted,
            skipped=summary.skipped,
            failed=summary.failed,
        )
        return summary

    def _summarize(
        self,
        parse_result: ParseResult,
        duplicates: int,
        outcome: PersistOutcome,
    ) -> IngestionSummary:
        errors = [
            SummaryError(kind="parse", reference=issue.row_identifier, reason=issue.reason)
            for issue in parse_result.errors
        ]
        errors.extend(
            SummaryError(kind="batch", reference=f"batch {failure.batch_index}", reason=failure.reason)
            for failure in outcome.batch_errors
        )

        return IngestionSummary(
            total_seen=parse_result.total_seen,
            inserted=outcome.inserted,
            skipped=duplicates + outcome.skipped_existing,
            failed=outcome.failed + len(parse_result.errors),
            errors=errors[: self._max_reported_errors],
        )

    def _cleanup(self, artifact: IngestionInput, log) -> None:
        if not artifact.delete_after_ingest:
            return
        try:
            artifact.path.unlink(missing_ok=True)
            log.debug("upload_removed")
        except OSError as e:
            log.warning("upload_cleanup_failed", error=str(e))


def create_ingestion_service(db: DatabaseManager) -> IngestionService:
    """Wire an IngestionService to a PostgreSQL-backed store."""
    settings = get_settings()
    persister = BatchPersister(SqlProductStore(db), batch_size=settings.batch_size)
    return IngestionService(persister, max_reported_errors=settings.max_reported_errors)
