"""Pytest configuration and shared fixtures.

Provides:
- Python path setup (so tests import the package without installing it)
- Fixtures for review datasets in tmp_path and an in-memory ProductStore

Builders live in tests/helpers.py.
"""
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from tests.helpers import InMemoryProductStore, review_row, write_csv  # noqa: E402


@pytest.fixture
def store() -> InMemoryProductStore:
    return InMemoryProductStore()


@pytest.fixture
def csv_file(tmp_path: Path) -> Path:
    """CSV with 5 valid rows, a blank-identity row and an in-file duplicate."""
    rows = [review_row(i) for i in range(1, 6)]
    rows.append(review_row(99, product_id="", product_name=""))
    rows.append(review_row(2, product_name="Duplicate of 2"))
    return write_csv(tmp_path / "reviews.csv", rows)
