"""Product-review catalog ingestion pipeline."""

__version__ = "0.1.0"
