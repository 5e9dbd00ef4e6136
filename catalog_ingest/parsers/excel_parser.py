"""Excel (XLSX) file parser with header-row discovery.

Review workbooks exported from the marketplace carry a banner row of links
in row 1, the real column headers in row 2 and data from row 3. Header
discovery reads the configured header row, scans at most
``max_header_columns`` leading columns and maps lower-cased header labels to
column indices; columns may be reordered or interleaved with extra ones.
"""
import asyncio
from pathlib import Path
from typing import Any, Final

from openpyxl import load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from catalog_ingest.config import get_logger
from catalog_ingest.errors.exceptions import ParserError
from catalog_ingest.models.ingestion import ParseResult
from catalog_ingest.parsers.base_parser import ParserInterface
from catalog_ingest.parsers.cell_normalizer import normalize
from catalog_ingest.parsers.record_shaper import SOURCE_COLUMNS

logger = get_logger(__name__)

HEADER_ROW: Final[int] = 2
DATA_START_ROW: Final[int] = 3
MAX_HEADER_COLUMNS: Final[int] = 20
# Label the banner row repeats in the header row; never a data column
BANNER_SENTINEL: Final[str] = "amazon"


class ExcelParser(ParserInterface):
    """Parser for XLSX review datasets (first worksheet only)."""

    supported_extensions = (".xlsx", ".xlsm")

    def __init__(
        self,
        header_row: int = HEADER_ROW,
        data_start_row: int = DATA_START_ROW,
        max_header_columns: int = MAX_HEADER_COLUMNS,
        sentinel_label: str = BANNER_SENTINEL,
    ) -> None:
        """
        Initialize Excel parser.

        Args:
            header_row: Row number (1-indexed) holding the column headers
            data_start_row: Row number (1-indexed) of the first data row
            max_header_columns: Upper bound on header columns scanned
            sentinel_label: Header label ignored during discovery
        """
        if data_start_row <= header_row:
            raise ValueError("data_start_row must come after header_row")
        self._header_row = header_row
        self._data_start_row = data_start_row
        self._max_header_columns = max_header_columns
        self._sentinel_label = sentinel_label.lower()

    def get_parser_name(self) -> str:
        """Return parser identifier."""
        return "excel"

    async def parse(self, file_path: Path) -> ParseResult:
        """Parse an XLSX file.

        The workbook is loaded with cached formula results and rich text
        preserved; the whole read runs in a worker thread.

        Raises:
            ParserError: If the file is missing or is not a readable workbook
        """
        path = Path(file_path)
        log = logger.bind(file_path=str(path))

        if not path.exists():
            raise ParserError(f"Excel file not found: {path}", details={"file_path": str(path)})

        result = await asyncio.to_thread(self._parse_workbook, path, log)

        log.info(
            "excel_parse_completed",
            records=len(result.records),
            parse_errors=len(result.errors),
            skipped_rows=result.skipped_rows,
        )
        return result

    def _parse_workbook(self, path: Path, log: Any) -> ParseResult:
        # A file handle, so uploads stored without an .xlsx suffix still load
        try:
            with path.open("rb") as handle:
                workbook = load_workbook(handle, data_only=True, rich_text=True)
        except Exception as e:
            raise ParserError(
                f"Failed to open Excel file: {e}",
                details={"file_path": str(path), "error": str(e)},
            ) from e

        try:
            if not workbook.worksheets:
                raise ParserError("No sheets found in Excel file")
            worksheet = workbook.worksheets[0]

            header_map = self.discover_headers(worksheet)
            missing = [
                column
                for column in (SOURCE_COLUMNS["business_key"], SOURCE_COLUMNS["name"])
                if column not in header_map
            ]
            if missing:
                log.warning("excel_identity_columns_missing", missing=missing, sheet=worksheet.title)
            log.debug("excel_header_map", header_map=header_map, sheet=worksheet.title)

            result = ParseResult()
            rows = worksheet.iter_rows(min_row=self._data_start_row)
            for row_number, row in enumerate(rows, start=self._data_start_row):
                fields = {
                    label: normalize(_cell_value(row[index])) if index < len(row) else None
                    for label, index in header_map.items()
                }
                self._accept_row(result, fields, f"row {row_number}")
            return result
        finally:
            workbook.close()

    def discover_headers(self, worksheet: Worksheet) -> dict[str, int]:
        """Map lower-cased header labels to 0-based column indices.

        The first occurrence of a label wins.
        """
        max_col = min(worksheet.max_column or 0, self._max_header_columns)
        header_map: dict[str, int] = {}

        for column in range(1, max_col + 1):
            value = normalize(_cell_value(worksheet.cell(row=self._header_row, column=column)))
            if value is None:
                continue
            label = str(value).strip().lower()
            if label == self._sentinel_label:
                continue
            header_map.setdefault(label, column - 1)

        return header_map


def _cell_value(cell: Any) -> Any:
    """Cell value, falling back to the link of a hyperlink cell with no text."""
    value = cell.value
    if value is None:
        link = getattr(cell, "hyperlink", None)
        if link is not None:
            return link.display or link.target
    return value
