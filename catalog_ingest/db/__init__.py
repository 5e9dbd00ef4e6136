"""Database module."""
from catalog_ingest.db.base import Base
from catalog_ingest.db.models import Product
from catalog_ingest.db.connection import DatabaseManager
from catalog_ingest.db.repositories import ProductsRepository, SqlProductStore

__all__ = [
    "Base",
    "Product",
    "DatabaseManager",
    "ProductsRepository",
    "SqlProductStore",
]
