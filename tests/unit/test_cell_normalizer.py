"""Unit tests for cell value normalization and numeric coercion."""
from datetime import date, datetime
from decimal import Decimal

import pytest
from openpyxl.cell.rich_text import CellRichText, TextBlock
from openpyxl.cell.text import InlineFont

from catalog_ingest.parsers.cell_normalizer import (
    is_spreadsheet_error,
    normalize,
    to_decimal,
    to_integer,
)


class TestNormalize:
    """Test normalize() over the raw shapes CSV and XLSX readers produce."""

    @pytest.mark.parametrize("raw", [None, "", "   ", "\t\n", float("nan")])
    def test_absent_values_become_none(self, raw):
        """Verify empty, whitespace-only and NaN cells are absent."""
        assert normalize(raw) is None

    @pytest.mark.parametrize("raw", [0, 42, 4.1, Decimal("399.00")])
    def test_numbers_pass_through(self, raw):
        """Verify native numbers are returned unchanged."""
        assert normalize(raw) == raw
        assert type(normalize(raw)) is type(raw)

    def test_booleans_are_stringified(self):
        """Verify TRUE/FALSE cells are not treated as numbers."""
        assert normalize(True) == "True"

    def test_datetime_becomes_calendar_date(self):
        """Verify date-typed cells collapse to an ISO calendar date."""
        assert normalize(datetime(2024, 3, 1, 9, 30)) == "2024-03-01"
        assert normalize(date(2023, 12, 31)) == "2023-12-31"

    def test_rich_text_is_concatenated(self):
        """Verify rich text runs are joined into plain text."""
        raw = CellRichText(["  Boat ", TextBlock(InlineFont(b=True), "Rockerz 255 "), " "])

        assert normalize(raw) == "Boat Rockerz 255"

    def test_strings_are_trimmed(self):
        """Verify strings keep their content but lose outer whitespace."""
        assert normalize("  ₹1,099 ") == "₹1,099"
        assert normalize("#N/A") == "#N/A"


class TestNumericCoercion:
    """Test to_decimal() and to_integer()."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("₹1,099", Decimal("1099")),
            ("₹399.50", Decimal("399.50")),
            ("64%", Decimal("64")),
            ("$ 12.5", Decimal("12.5")),
            (4.1, Decimal("4.1")),
            (7, Decimal("7")),
        ],
    )
    def test_to_decimal(self, value, expected):
        assert to_decimal(value) == expected

    def test_float_input_has_no_binary_artifacts(self):
        """Verify 0.1 is read as Decimal('0.1'), not its binary expansion."""
        assert to_decimal(0.1) == Decimal("0.1")

    @pytest.mark.parametrize("value", [None, "", "n/a", "₹", "1.2.3", "inf", Decimal("NaN")])
    def test_to_decimal_unparseable_is_none(self, value):
        """Verify unparseable input yields None instead of raising."""
        assert to_decimal(value) is None

    def test_to_integer_handles_grouping(self):
        assert to_integer("24,269") == 24269
        assert to_integer(1079.0) == 1079

    def test_to_integer_truncates_fractions(self):
        assert to_integer("4.9") == 4

    def test_to_integer_unparseable_is_none(self):
        assert to_integer("lots") is None
        assert to_integer(None) is None

    @pytest.mark.parametrize("value", ["1e19", "1e5000", "-1e1000000", Decimal("1E+5000000")])
    def test_to_integer_refuses_giant_magnitudes(self, value):
        """Verify huge exponents yield None instead of building the integer."""
        assert to_integer(value) is None

    def test_to_integer_keeps_eighteen_digit_values(self):
        assert to_integer("999,999,999,999,999,999") == 999_999_999_999_999_999

    def test_to_decimal_accepts_large_native_ints(self):
        """Verify a large integer cell converts without a string round trip."""
        assert to_decimal(10**5000) == Decimal(10) ** 5000


class TestSpreadsheetErrors:
    """Test is_spreadsheet_error()."""

    @pytest.mark.parametrize("value", ["#N/A", "#REF!", "#DIV/0!", "#VALUE!", "#NAME?"])
    def test_error_literals(self, value):
        assert is_spreadsheet_error(value) is True

    @pytest.mark.parametrize("value", ["B07JW9H4J1", "#1 bestseller", None, 4.1])
    def test_regular_values(self, value):
        assert is_spreadsheet_error(value) is False
