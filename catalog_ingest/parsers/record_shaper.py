"""Record shaper: builds a ProductRecord from one row of resolved cell values."""
from decimal import ROUND_FLOOR, Decimal, DecimalException
from typing import Any, Final, Mapping

from catalog_ingest.config import get_logger
from catalog_ingest.errors.exceptions import RowParseError, RowRejected
from catalog_ingest.models.product_record import (
    BUSINESS_KEY_MAX,
    CATEGORY_MAX,
    LINK_MAX,
    NAME_MAX,
    REVIEW_BODY_MAX,
    REVIEW_TITLE_MAX,
    UNCATEGORIZED,
    ProductRecord,
)
from catalog_ingest.parsers.cell_normalizer import (
    NormalizedValue,
    is_spreadsheet_error,
    to_decimal,
    to_integer,
)

logger = get_logger(__name__)

# Record field -> column name in the review dataset
SOURCE_COLUMNS: Final[dict[str, str]] = {
    "business_key": "product_id",
    "name": "product_name",
    "category": "category",
    "price_discounted": "discounted_price",
    "price_original": "actual_price",
    "discount_percent": "discount_percentage",
    "rating": "rating",
    "rating_count": "rating_count",
    "review_title": "review_title",
    "review_body": "review_content",
    "image_ref": "img_link",
    "external_link": "product_link",
}

EXPECTED_COLUMNS: Final[tuple[str, ...]] = tuple(SOURCE_COLUMNS.values())

CATEGORY_SEPARATOR: Final[str] = "|"

# Exclusive magnitude limits of the numeric store columns
NUMERIC_LIMITS: Final[dict[str, Decimal]] = {
    "price_discounted": Decimal("1e10"),  # NUMERIC(12, 2)
    "price_original": Decimal("1e10"),
    "discount_percent": Decimal("1e3"),  # NUMERIC(5, 2)
    "rating": Decimal("1e2"),  # NUMERIC(3, 1)
}
INTEGER_MAX: Final[int] = 2**31 - 1


def shape_record(fields: Mapping[str, NormalizedValue]) -> ProductRecord:
    """Build a ProductRecord from normalized values keyed by source column name.

    Missing columns are treated as absent values.

    Raises:
        RowRejected: ``product_id`` or ``product_name`` is absent
        RowParseError: a value the store would refuse (spreadsheet error
            literal in an identity cell, number outside a column's range)
    """

    def get(field: str) -> NormalizedValue:
        return fields.get(SOURCE_COLUMNS[field])

    raw_key = get("business_key")
    raw_name = get("name")
    if is_spreadsheet_error(raw_key) or is_spreadsheet_error(raw_name):
        raise RowParseError(
            "Identity cell contains a spreadsheet error value",
            details={"product_id": raw_key, "product_name": raw_name},
        )

    business_key = _bounded_text(raw_key, BUSINESS_KEY_MAX)
    name = _bounded_text(raw_name, NAME_MAX)
    if business_key is None or name is None:
        raise RowRejected("Row has no product_id or product_name")

    try:
        raw_count = to_decimal(get("rating_count"))
        if raw_count is not None and raw_count.copy_abs() > INTEGER_MAX:
            raise RowParseError(
                "rating_count is out of range",
                details={"product_id": business_key, "limit": INTEGER_MAX},
            )

        raw_numbers = {field: to_decimal(get(field)) for field in NUMERIC_LIMITS}
        _check_range(raw_numbers, business_key)
        numbers = dict(
            raw_numbers,
            discount_percent=normalize_discount(raw_numbers["discount_percent"]),
        )
        _check_range(numbers, business_key)
    except DecimalException as e:
        raise RowParseError(
            f"Numeric value could not be converted ({type(e).__name__})",
            details={"product_id": business_key},
        ) from e

    return ProductRecord(
        business_key=business_key,
        name=name,
        category=top_category(get("category")),
        rating_count=to_integer(raw_count),
        review_title=_bounded_text(get("review_title"), REVIEW_TITLE_MAX),
        review_body=_bounded_text(get("review_body"), REVIEW_BODY_MAX),
        image_ref=_bounded_text(get("image_ref"), LINK_MAX),
        external_link=_bounded_text(get("external_link"), LINK_MAX),
        **numbers,
    )


def top_category(value: NormalizedValue) -> str:
    """Keep the first segment of a path like ``Computers|Accessories|Cables``."""
    text = _text(value)
    if text is None:
        return UNCATEGORIZED
    head = text.split(CATEGORY_SEPARATOR, 1)[0].strip()[:CATEGORY_MAX]
    return head or UNCATEGORIZED


def normalize_discount(value: Decimal | None) -> Decimal | None:
    """Express a discount on the 0-100 scale.

    Values up to 1 are read as fractions and rescaled (``0.58`` → ``58``),
    larger values are already percentages. Exactly ``1`` is ambiguous
    between a 1% discount and a 100% one; it is rescaled like any fraction
    and logged.

    Rescaled values are rounded half toward positive infinity, so
    ``-0.005`` becomes ``0``.
    """
    if value is None or value > 1:
        return value
    if value == 1:
        logger.warning("discount_fraction_boundary", raw_value=str(value))
    return (value * 100 + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR)


def _check_range(values: Mapping[str, Decimal | None], business_key: str) -> None:
    for field, value in values.items():
        # copy_abs() does not round to the decimal context
        if value is not None and value.copy_abs() >= NUMERIC_LIMITS[field]:
            raise RowParseError(
                f"{SOURCE_COLUMNS[field]} is out of range",
                details={"product_id": business_key, "limit": str(NUMERIC_LIMITS[field])},
            )


def _text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        # spreadsheet numbers used as identifiers, e.g. 1001.0
        value = int(value)
    text = str(value).strip()
    return text or None


def _bounded_text(value: Any, limit: int) -> str | None:
    text = _text(value)
    if text is None:
        return None
    return text[:limit].strip() or None
