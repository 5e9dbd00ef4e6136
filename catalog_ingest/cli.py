"""Operator command line for seeding and ingesting review datasets.

Usage:
    catalog-ingest seed [--dataset PATH] [--create-schema] [--force]
    catalog-ingest ingest PATH [--delete] [--filename NAME]
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

from catalog_ingest.config import configure_logging, get_logger, get_settings
from catalog_ingest.db.connection import DatabaseManager
from catalog_ingest.db.repositories.products_repo import SqlProductStore
from catalog_ingest.errors.exceptions import CatalogIngestError
from catalog_ingest.models.ingestion import IngestionSummary, SeedArtifact, UploadedArtifact
from catalog_ingest.services.ingestion_service import create_ingestion_service

logger = get_logger(__name__)


async def run_seed(
    dataset: Path | None,
    create_schema: bool = False,
    force: bool = False,
) -> IngestionSummary | None:
    """Seed an empty catalog from the bundled dataset.

    Seeding happens only when the table is empty and either ``force`` is set
    or ``AUTO_SEED`` is enabled. The dataset is never deleted.

    Returns:
        The ingestion summary, or None when seeding was skipped
    """
    settings = get_settings()
    dataset = dataset or (Path(settings.seed_dataset_path) if settings.seed_dataset_path else None)

    async with DatabaseManager(settings) as db:
        if create_schema:
            await db.create_schema()

        store = SqlProductStore(db)
        count = await store.count()
        summary = None

        if count > 0:
            logger.info("seed_skipped_catalog_not_empty", products=count)
        elif not (force or settings.auto_seed):
            logger.info("seed_skipped_disabled", hint="set AUTO_SEED=true or pass --force")
        elif dataset is None or not dataset.exists():
            logger.warning("seed_skipped_dataset_missing", dataset=str(dataset))
        else:
            logger.info("seed_started", dataset=str(dataset))
            summary = await create_ingestion_service(db).ingest(SeedArtifact(path=dataset))

        logger.info("catalog_product_count", products=await store.count())
        return summary


async def run_ingest(path: Path, delete: bool = False, filename: str | None = None) -> IngestionSummary:
    """Ingest one file; ``delete`` treats it as a transient upload."""
    artifact = UploadedArtifact(path=path, filename=filename) if delete else SeedArtifact(path=path)
    async with DatabaseManager() as db:
        return await create_ingestion_service(db).ingest(artifact)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog-ingest",
        description="Load product-review datasets (CSV/XLSX) into the catalog",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    seed = subparsers.add_parser("seed", help="Seed an empty catalog from a dataset")
    seed.add_argument("--dataset", type=Path, help="Dataset path (default: SEED_DATASET_PATH)")
    seed.add_argument("--create-schema", action="store_true", help="Create missing tables first")
    seed.add_argument("--force", action="store_true", help="Seed even when AUTO_SEED is off")

    ingest = subparsers.add_parser("ingest", help="Ingest one CSV or XLSX file")
    ingest.add_argument("path", type=Path)
    ingest.add_argument("--delete", action="store_true", help="Delete the file afterwards")
    ingest.add_argument("--filename", help="Original filename, used for format detection")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    try:
        if args.command == "seed":
            summary = asyncio.run(run_seed(args.dataset, args.create_schema, args.force))
        else:
            summary = asyncio.run(run_ingest(args.path, args.delete, args.filename))
    except CatalogIngestError as e:
        logger.error("command_failed", command=args.command, error=e.message, details=e.details)
        return 1

    if summary is not None:
        print(json.dumps(summary.model_dump(mode="json"), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
