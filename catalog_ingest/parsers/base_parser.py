"""Abstract parser interface for pluggable file formats."""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Mapping

from catalog_ingest.config import get_logger
from catalog_ingest.errors.exceptions import RowParseError, RowRejected
from catalog_ingest.models.ingestion import ParseIssue, ParseResult
from catalog_ingest.parsers.cell_normalizer import NormalizedValue
from catalog_ingest.parsers.record_shaper import shape_record

logger = get_logger(__name__)


class ParserInterface(ABC):
    """Abstract base class for all file parsers.

    Implementations must provide:
    - parse(): read a file into a ParseResult
    - get_parser_name(): unique parser identifier
    - supported_extensions: lower-case extensions including the dot

    Rows fall into exactly one of three outcomes: a record, a silent skip
    (no identity fields), or a reported ParseIssue. ``_accept_row`` keeps
    those outcomes apart for every format.
    """

    supported_extensions: tuple[str, ...] = ()

    @abstractmethod
    async def parse(self, file_path: Path) -> ParseResult:
        """Parse a file and return its records and row-level errors.

        Raises:
            ParserError: If the file cannot be read at all
        """
        pass

    @abstractmethod
    def get_parser_name(self) -> str:
        """Return parser identifier (e.g. "csv", "excel")."""
        pass

    def _accept_row(
        self,
        result: ParseResult,
        fields: Mapping[str, NormalizedValue],
        row_identifier: str,
    ) -> None:
        """Shape one row and file it under the matching outcome."""
        try:
            result.records.append(shape_record(fields))
        except RowRejected:
            result.skipped_rows += 1
            logger.debug("row_skipped_no_identity", row=row_identifier)
        except RowParseError as e:
            result.errors.append(ParseIssue(row_identifier=row_identifier, reason=e.message))
            logger.warning("row_parse_error", row=row_identifier, error=e.message)
