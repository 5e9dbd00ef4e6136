"""ORM models."""
from catalog_ingest.db.models.product import Product

__all__ = ["Product"]
