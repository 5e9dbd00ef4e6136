"""Pydantic model for a normalized product record."""
from decimal import Decimal
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

UNCATEGORIZED: Final[str] = "Uncategorized"

# Column bounds shared by the record shaper and the ORM table
BUSINESS_KEY_MAX: Final[int] = 40
NAME_MAX: Final[int] = 500
CATEGORY_MAX: Final[int] = 80
REVIEW_TITLE_MAX: Final[int] = 500
REVIEW_BODY_MAX: Final[int] = 2000
LINK_MAX: Final[int] = 500


class ProductRecord(BaseModel):
    """Validated, bounded product row ready for insertion.

    Instances are produced by the record shaper and never mutated. String
    fields have already been trimmed and truncated to their column bounds.
    """

    model_config = ConfigDict(frozen=True)

    business_key: str = Field(
        ...,
        min_length=1,
        max_length=BUSINESS_KEY_MAX,
        description="External product identifier, unique in the store",
    )
    name: str = Field(..., min_length=1, max_length=NAME_MAX, description="Product name")
    category: str = Field(
        default=UNCATEGORIZED,
        max_length=CATEGORY_MAX,
        description="Top-level category segment",
    )
    price_discounted: Decimal | None = None
    price_original: Decimal | None = None
    discount_percent: Decimal | None = Field(
        default=None, description="Discount on a 0-100 scale"
    )
    rating: Decimal | None = None
    rating_count: int | None = None
    review_title: str | None = Field(default=None, max_length=REVIEW_TITLE_MAX)
    review_body: str | None = Field(default=None, max_length=REVIEW_BODY_MAX)
    image_ref: str | None = Field(default=None, max_length=LINK_MAX)
    external_link: str | None = Field(default=None, max_length=LINK_MAX)

    def to_row(self) -> dict:
        """Column-name keyed dict for insert statements."""
        return self.model_dump()
