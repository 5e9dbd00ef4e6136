"""Product ORM model: one row per business key."""
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Computed,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import TSVECTOR
from sqlalchemy.orm import Mapped, mapped_column

from catalog_ingest.db.base import Base
from catalog_ingest.models.product_record import (
    BUSINESS_KEY_MAX,
    CATEGORY_MAX,
    LINK_MAX,
    NAME_MAX,
    REVIEW_BODY_MAX,
    REVIEW_TITLE_MAX,
    UNCATEGORIZED,
)


class Product(Base):
    """Catalog product.

    ``name_tsv`` is generated by the database from ``name``; inserts never
    write it.
    """

    __tablename__ = "products"
    __table_args__ = (
        UniqueConstraint("business_key", name="uq_products_business_key"),
        Index("idx_products_name_tsv", "name_tsv", postgresql_using="gin"),
        Index("idx_products_category", "category"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    business_key: Mapped[str] = mapped_column(String(BUSINESS_KEY_MAX), nullable=False)
    name: Mapped[str] = mapped_column(String(NAME_MAX), nullable=False)
    category: Mapped[str] = mapped_column(
        String(CATEGORY_MAX), nullable=False, server_default=UNCATEGORIZED
    )
    price_discounted: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    price_original: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    discount_percent: Mapped[Decimal | None] = mapped_column(
        Numeric(5, 2), nullable=True, doc="Discount on a 0-100 scale"
    )
    rating: Mapped[Decimal | None] = mapped_column(Numeric(3, 1), nullable=True)
    rating_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    review_title: Mapped[str | None] = mapped_column(String(REVIEW_TITLE_MAX), nullable=True)
    review_body: Mapped[str | None] = mapped_column(String(REVIEW_BODY_MAX), nullable=True)
    image_ref: Mapped[str | None] = mapped_column(String(LINK_MAX), nullable=True)
    external_link: Mapped[str | None] = mapped_column(String(LINK_MAX), nullable=True)
    name_tsv: Mapped[str | None] = mapped_column(
        TSVECTOR,
        Computed("to_tsvector('english', coalesce(name, ''))", persisted=True),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, business_key='{self.business_key}')>"
