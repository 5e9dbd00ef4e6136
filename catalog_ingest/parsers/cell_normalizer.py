"""
Cell Normalizer
===============

Converts raw cell values from CSV or XLSX sources into one of four shapes:
absent (``None``), a number (``int`` / ``float`` / ``Decimal``), or a trimmed
plain string.

Example inputs:
- ``None`` / ``""`` / ``"   "`` → None
- ``4.1`` → 4.1
- ``datetime(2024, 3, 1, 9, 30)`` → "2024-03-01"
- ``CellRichText(["Boat ", TextBlock(font, "Rockerz")])`` → "Boat Rockerz"
- ``"  ₹1,099 "`` → "₹1,099" (coercion to a number is a separate step)
"""

import math
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from numbers import Number
from typing import Any, Final

from openpyxl.cell.cell import ERROR_CODES
from openpyxl.cell.rich_text import CellRichText, TextBlock

NormalizedValue = int | float | Decimal | str | None

# Currency symbols, percent sign, thousands separators and any whitespace
_NUMERIC_NOISE: Final[re.Pattern[str]] = re.compile(r"[₹$€£¥₽%,\s]")

# Error literals a spreadsheet writes into cells whose formula failed
SPREADSHEET_ERRORS: Final[frozenset[str]] = frozenset(ERROR_CODES)

# Largest decimal exponent to_integer() converts
_INTEGER_EXPONENT_MAX: Final[int] = 18


def normalize(raw: Any) -> NormalizedValue:
    """
    Normalize one raw cell value.

    Rules, in priority order: absent/empty → None; native number → passthrough
    (NaN → None); date → ISO calendar date; rich text → concatenated plain
    text; anything else → ``str()``, trimmed.

    Formula cells are read with cached results, and hyperlink cells carry
    their display text as the value, so both arrive here as plain values.
    """
    if raw is None:
        return None

    if isinstance(raw, Number) and not isinstance(raw, bool):
        if isinstance(raw, float) and math.isnan(raw):
            return None
        return raw

    # datetime is a subclass of date
    if isinstance(raw, datetime):
        return raw.date().isoformat()
    if isinstance(raw, date):
        return raw.isoformat()

    if isinstance(raw, CellRichText):
        text = "".join(
            part.text if isinstance(part, TextBlock) else str(part) for part in raw
        )
    else:
        text = str(raw)

    text = text.strip()
    return text or None


def to_decimal(value: NormalizedValue) -> Decimal | None:
    """
    Coerce a normalized value to Decimal.

    Strips currency symbols, percent signs, thousands separators and
    whitespace. Absent or unparseable input yields None; this never raises.

    Examples:
        >>> to_decimal("₹1,099")
        Decimal('1099')

        >>> to_decimal("64%")
        Decimal('64')

        >>> to_decimal("n/a") is None
        True
    """
    if value is None:
        return None

    if isinstance(value, Decimal):
        return value if value.is_finite() else None

    if isinstance(value, int) and not isinstance(value, bool):
        return Decimal(value)

    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        # str() keeps the shortest repr and avoids binary float artifacts
        return Decimal(str(value))

    cleaned = _NUMERIC_NOISE.sub("", str(value))
    if not cleaned:
        return None

    try:
        result = Decimal(cleaned)
    except (InvalidOperation, ValueError):
        return None

    return result if result.is_finite() else None


def to_integer(value: NormalizedValue) -> int | None:
    """
    Coerce a normalized value to int.

    Handles grouped digits such as "24,269" that ``int()`` alone rejects.
    Fractional input is truncated toward zero. Magnitudes of ``1e19`` and
    above yield None without building the integer.
    """
    number = to_decimal(value)
    if number is None or number.adjusted() > _INTEGER_EXPONENT_MAX:
        return None
    return int(number)


def is_spreadsheet_error(value: NormalizedValue) -> bool:
    """Check whether a value is a spreadsheet error literal such as ``#N/A``."""
    return isinstance(value, str) and value in SPREADSHEET_ERRORS
