"""Pipeline services: deduplication, batch persistence, orchestration."""
from catalog_ingest.services.deduplication import deduplicate
from catalog_ingest.services.batch_persister import BatchPersister, ProductStore
from catalog_ingest.services.ingestion_service import (
    IngestionService,
    create_ingestion_service,
)

__all__ = [
    "deduplicate",
    "BatchPersister",
    "ProductStore",
    "IngestionService",
    "create_ingestion_service",
]
