"""Parser modules for review dataset files."""
from catalog_ingest.parsers.base_parser import ParserInterface
from catalog_ingest.parsers.parser_registry import (
    register_parser,
    get_parser,
    create_parser_for_extension,
    list_supported_extensions,
)
from catalog_ingest.parsers.cell_normalizer import normalize, to_decimal, to_integer
from catalog_ingest.parsers.record_shaper import shape_record, EXPECTED_COLUMNS, SOURCE_COLUMNS
from catalog_ingest.parsers.csv_parser import CsvParser
from catalog_ingest.parsers.excel_parser import ExcelParser

# Register parsers
register_parser(CsvParser)
register_parser(ExcelParser)

__all__ = [
    "ParserInterface",
    "register_parser",
    "get_parser",
    "create_parser_for_extension",
    "list_supported_extensions",
    "normalize",
    "to_decimal",
    "to_integer",
    "shape_record",
    "EXPECTED_COLUMNS",
    "SOURCE_COLUMNS",
    "CsvParser",
    "ExcelParser",
]
