"""
Within-file deduplication by business key.

Required before persistence: a multi-row ``INSERT ... ON CONFLICT`` cannot
resolve two rows with the same key inside one statement.
"""

from typing import Sequence

from catalog_ingest.config import get_logger
from catalog_ingest.models.product_record import ProductRecord

logger = get_logger(__name__)


def deduplicate(records: Sequence[ProductRecord]) -> tuple[list[ProductRecord], int]:
    """
    Drop records whose business key was already seen.

    The first occurrence of each key is kept, in input order.

    Returns:
        Tuple of (unique records, number of duplicates removed)
    """
    seen: set[str] = set()
    unique: list[ProductRecord] = []
    duplicates = 0

    for record in records:
        if record.business_key in seen:
            duplicates += 1
            continue
        seen.add(record.business_key)
        unique.append(record)

    if duplicates:
        logger.info(
            "duplicates_removed",
            total=len(records),
            unique=len(unique),
            duplicates=duplicates,
        )
    return unique, duplicates
