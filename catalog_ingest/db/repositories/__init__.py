"""Repositories for database access."""
from catalog_ingest.db.repositories.products_repo import (
    ProductsRepository,
    SqlProductStore,
    build_insert_statement,
)

__all__ = ["ProductsRepository", "SqlProductStore", "build_insert_statement"]
