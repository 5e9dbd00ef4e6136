"""
Products Repository
===================

Data access layer for the products table.

Inserts never update an existing row: a business key that is already
stored is skipped by ``ON CONFLICT DO NOTHING``. The first committed row
for a key wins.
"""

from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_ingest.config import get_logger
from catalog_ingest.db.connection import DatabaseManager
from catalog_ingest.db.models.product import Product
from catalog_ingest.models.product_record import ProductRecord

logger = get_logger(__name__)

products_table = Product.__table__


def build_insert_statement(records: Sequence[ProductRecord]):
    """Single multi-row INSERT that skips business-key conflicts.

    ``RETURNING`` yields only the rows actually inserted, so the number of
    returned keys is the affected-row count.
    """
    return (
        insert(products_table)
        .values([record.to_row() for record in records])
        .on_conflict_do_nothing(index_elements=[products_table.c.business_key])
        .returning(products_table.c.business_key)
    )


class ProductsRepository:
    """Repository for products table operations within one session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert_ignoring_conflicts(self, records: Sequence[ProductRecord]) -> int:
        """
        Insert records, skipping keys that already exist.

        Records must have distinct business keys: the conflict clause only
        covers rows committed before this statement, not sibling rows in it.

        Returns:
            Number of rows inserted
        """
        if not records:
            return 0

        result = await self._session.execute(build_insert_statement(records))
        inserted = len(result.scalars().all())

        logger.debug("products_inserted", attempted=len(records), inserted=inserted)
        return inserted

    async def count(self) -> int:
        """Count stored products."""
        result = await self._session.execute(select(func.count()).select_from(products_table))
        return result.scalar_one()


class SqlProductStore:
    """ProductStore backed by PostgreSQL.

    Every ``insert_batch`` call runs in its own session and transaction.
    """

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def insert_batch(self, records: Sequence[ProductRecord]) -> int:
        async with self._db.session() as session:
            return await ProductsRepository(session).insert_ignoring_conflicts(records)

    async def count(self) -> int:
        async with self._db.session() as session:
            return await ProductsRepository(session).count()
