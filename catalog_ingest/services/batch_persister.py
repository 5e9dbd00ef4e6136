"""
Batch Persister
===============

Writes records in fixed-size batches, one transaction per batch, in
partition order. A failing batch is rolled back and recorded; the
remaining batches still run, so one corrupt region of a file does not
prevent the rest from being committed.
"""

from typing import Protocol, Sequence

from catalog_ingest.config import get_logger, get_settings
from catalog_ingest.errors.exceptions import BatchTransactionError
from catalog_ingest.models.ingestion import BatchFailure, PersistOutcome
from catalog_ingest.models.product_record import ProductRecord

logger = get_logger(__name__)


class ProductStore(Protocol):
    """Transactional sink for product batches."""

    async def insert_batch(self, records: Sequence[ProductRecord]) -> int:
        """Insert one batch in its own transaction, skipping existing keys.

        Returns the number of rows inserted. Raises on any failure after
        rolling the transaction back.
        """
        ...


class BatchPersister:
    """Persists deduplicated records through a ProductStore."""

    def __init__(self, store: ProductStore, batch_size: int | None = None) -> None:
        self._store = store
        self._batch_size = batch_size if batch_size is not None else get_settings().batch_size
        if self._batch_size < 1:
            raise ValueError("batch_size must be positive")

    @property
    def batch_size(self) -> int:
        return self._batch_size

    async def persist(self, records: Sequence[ProductRecord]) -> PersistOutcome:
        """
        Insert records batch by batch.

        Batches run sequentially. For each one, inserted rows add to
        ``inserted`` and rows rejected as pre-existing add to
        ``skipped_existing``; if the transaction fails, the whole batch adds
        to ``failed`` and a BatchFailure is recorded. Never raises for a
        batch-level fault.
        """
        outcome = PersistOutcome()

        for batch_index, start in enumerate(range(0, len(records), self._batch_size)):
            batch = records[start:start + self._batch_size]
            log = logger.bind(batch_index=batch_index, batch_size=len(batch))

            try:
                inserted = await self._insert(batch, batch_index)
            except BatchTransactionError as e:
                outcome.failed += len(batch)
                outcome.batch_errors.append(
                    BatchFailure(
                        batch_index=batch_index,
                        size=len(batch),
                        first_key=batch[0].business_key,
                        reason=e.message,
                    )
                )
                log.warning(
                    "batch_insert_failed",
                    error=e.message,
                    error_type=e.details.get("error_type"),
                )
                continue

            outcome.inserted += inserted
            outcome.skipped_existing += len(batch) - inserted
            log.debug("batch_committed", inserted=inserted, skipped=len(batch) - inserted)

        logger.info(
            "persist_completed",
            records=len(records),
            inserted=outcome.inserted,
            skipped_existing=outcome.skipped_existing,
            failed=outcome.failed,
            failed_batches=len(outcome.batch_errors),
        )
        return outcome

    async def _insert(self, batch: Sequence[ProductRecord], batch_index: int) -> int:
        try:
            return await self._store.insert_batch(batch)
        except Exception as e:
            raise BatchTransactionError(
                f"Batch {batch_index} failed: {e}",
                details={"error_type": type(e).__name__, "batch_index": batch_index},
            ) from e
