"""Unit tests for the products repository and its insert statement."""
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from catalog_ingest.db.models import Product
from catalog_ingest.db.repositories.products_repo import (
    ProductsRepository,
    SqlProductStore,
    build_insert_statement,
)
from tests.helpers import make_record


def compiled_sql(statement) -> str:
    return str(statement.compile(dialect=postgresql.dialect()))


class TestInsertStatement:
    """Test the generated INSERT ... ON CONFLICT statement."""

    def test_skips_business_key_conflicts(self):
        sql = compiled_sql(build_insert_statement([make_record("A"), make_record("B")]))

        assert "ON CONFLICT (business_key) DO NOTHING" in sql
        assert "RETURNING products.business_key" in sql

    def test_never_writes_generated_or_server_columns(self):
        """Verify the search vector and defaults are left to the database."""
        sql = compiled_sql(build_insert_statement([make_record("A")]))

        assert "name_tsv" not in sql
        assert "created_at" not in sql

    def test_one_statement_for_many_rows(self):
        statement = build_insert_statement([make_record(f"K{i}") for i in range(3)])
        params = statement.compile(dialect=postgresql.dialect()).params

        assert params["business_key_m0"] == "K0"
        assert params["business_key_m2"] == "K2"


class TestProductsTable:
    """Test table definition against the store schema."""

    def test_unique_business_key(self):
        constraints = {c.name for c in Product.__table__.constraints}

        assert "uq_products_business_key" in constraints

    def test_name_search_vector_is_generated(self):
        column = Product.__table__.c.name_tsv

        assert column.computed is not None
        assert column.computed.persisted is True

    def test_category_default(self):
        assert Product.__table__.c.category.server_default.arg == "Uncategorized"


class TestProductsRepository:
    """Test ProductsRepository with a mocked session."""

    @pytest.mark.asyncio
    async def test_counts_returned_keys(self):
        """Verify the inserted count is the number of RETURNING rows."""
        result = MagicMock()
        result.scalars.return_value.all.return_value = ["A"]
        session = AsyncMock()
        session.execute.return_value = result

        inserted = await ProductsRepository(session).insert_ignoring_conflicts(
            [make_record("A"), make_record("B")]
        )

        assert inserted == 1
        session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_batch_skips_database(self):
        session = AsyncMock()

        assert await ProductsRepository(session).insert_ignoring_conflicts([]) == 0
        session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_count(self):
        result = MagicMock()
        result.scalar_one.return_value = 1351
        session = AsyncMock()
        session.execute.return_value = result

        assert await ProductsRepository(session).count() == 1351


class TestSqlProductStore:
    """Test that each batch runs in its own session."""

    @pytest.mark.asyncio
    async def test_insert_batch_uses_fresh_session(self):
        result = MagicMock()
        result.scalars.return_value.all.return_value = ["A", "B"]
        session = AsyncMock()
        session.execute.return_value = result

        db = MagicMock()
        db.session.return_value.__aenter__.return_value = session
        store = SqlProductStore(db)

        assert await store.insert_batch([make_record("A"), make_record("B")]) == 2
        assert await store.insert_batch([make_record("A"), make_record("B")]) == 2
        assert db.session.call_count == 2
