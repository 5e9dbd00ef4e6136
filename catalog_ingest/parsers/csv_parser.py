"""CSV file parser implementation."""
import asyncio
from pathlib import Path
from typing import Any

import pandas as pd

from catalog_ingest.config import get_logger, get_settings
from catalog_ingest.errors.exceptions import ParserError
from catalog_ingest.models.ingestion import ParseIssue, ParseResult
from catalog_ingest.parsers.base_parser import ParserInterface
from catalog_ingest.parsers.cell_normalizer import normalize
from catalog_ingest.parsers.record_shaper import EXPECTED_COLUMNS, SOURCE_COLUMNS

logger = get_logger(__name__)

_IDENTITY_COLUMNS = (SOURCE_COLUMNS["business_key"], SOURCE_COLUMNS["name"])


class CsvParser(ParserInterface):
    """Parser for delimited-text review datasets.

    The first line is the literal header and must use the dataset column
    names (``product_id``, ``product_name``, ...). There is no header-offset
    detection. Rows are streamed in chunks of ``chunk_size`` and each chunk
    read is a suspension point.

    Lines with more fields than the header are reported as parse errors;
    rows without ``product_id`` / ``product_name`` are skipped silently.
    """

    supported_extensions = (".csv",)

    def __init__(self, chunk_size: int | None = None, delimiter: str = ","):
        self._chunk_size = chunk_size or get_settings().csv_chunk_size
        self._delimiter = delimiter

    def get_parser_name(self) -> str:
        """Return parser identifier."""
        return "csv"

    async def parse(self, file_path: Path) -> ParseResult:
        """Parse a CSV file.

        Args:
            file_path: Path to the CSV file

        Returns:
            ParseResult with shaped records and reported row errors

        Raises:
            ParserError: If the file is missing, empty or not valid CSV
        """
        path = Path(file_path)
        log = logger.bind(file_path=str(path))

        if not path.exists():
            raise ParserError(f"CSV file not found: {path}", details={"file_path": str(path)})

        try:
            try:
                result = await self._read(path, "utf-8-sig", log)
            except UnicodeDecodeError as e:
                log.warning("utf8_decode_failed_trying_latin1", error=str(e))
                result = await self._read(path, "latin-1", log)
        except pd.errors.EmptyDataError as e:
            raise ParserError("CSV file is empty or contains no data") from e
        except pd.errors.ParserError as e:
            raise ParserError(f"CSV parsing error: {e}", details={"file_path": str(path)}) from e

        log.info(
            "csv_parse_completed",
            records=len(result.records),
            parse_errors=len(result.errors),
            skipped_rows=result.skipped_rows,
        )
        return result

    async def _read(self, path: Path, encoding: str, log: Any) -> ParseResult:
        result = ParseResult()

        def on_bad_line(fields: list[str]) -> None:
            head = fields[0][:40] if fields else ""
            result.errors.append(
                ParseIssue(
                    row_identifier=f"line starting '{head}'",
                    reason=f"Line has {len(fields)} fields, more than the header",
                )
            )
            # returning None drops the line
            return None

        reader = pd.read_csv(
            path,
            sep=self._delimiter,
            encoding=encoding,
            dtype=str,
            keep_default_na=False,
            chunksize=self._chunk_size,
            engine="python",
            on_bad_lines=on_bad_line,
        )

        row_number = 0
        with reader:
            while True:
                chunk = await asyncio.to_thread(next, reader, None)
                if chunk is None:
                    break

                if row_number == 0:
                    self._check_header(list(chunk.columns), log)

                chunk.columns = [str(column).strip() for column in chunk.columns]
                for row in chunk.to_dict("records"):
                    row_number += 1
                    fields = {column: normalize(row.get(column)) for column in EXPECTED_COLUMNS}
                    self._accept_row(result, fields, f"row {row_number}")

        return result

    def _check_header(self, headers: list[Any], log: Any) -> None:
        present = {str(header).strip() for header in headers}
        missing = [column for column in _IDENTITY_COLUMNS if column not in present]
        if missing:
            log.warning("csv_identity_columns_missing", missing=missing, headers=sorted(present))
        else:
            log.debug("csv_headers_read", headers=sorted(present))
