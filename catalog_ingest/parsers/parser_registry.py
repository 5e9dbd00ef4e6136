"""Parser registry mapping file extensions to parser classes."""
from typing import Dict, Type, Optional

from catalog_ingest.errors.exceptions import ParserError, UnsupportedFormatError
from catalog_ingest.parsers.base_parser import ParserInterface


# Global registry mapping lower-case extensions (".csv") to parser classes
_parser_registry: Dict[str, Type[ParserInterface]] = {}


def register_parser(parser_class: Type[ParserInterface]) -> None:
    """Register a parser class for each of its supported extensions.

    Raises:
        TypeError: If parser_class does not inherit from ParserInterface
        ValueError: If one of its extensions is already registered
    """
    if not issubclass(parser_class, ParserInterface):
        raise TypeError(
            f"Parser class {parser_class.__name__} must inherit from ParserInterface"
        )

    for extension in parser_class.supported_extensions:
        key = extension.lower()
        if key in _parser_registry:
            raise ValueError(
                f"Extension '{key}' is already registered. "
                f"Existing: {_parser_registry[key].__name__}"
            )
        _parser_registry[key] = parser_class


def get_parser(extension: str) -> Optional[Type[ParserInterface]]:
    """Get parser class for a file extension, or None."""
    return _parser_registry.get(extension.lower())


def create_parser_for_extension(extension: str, **kwargs) -> ParserInterface:
    """Create a parser instance for a file extension.

    Raises:
        UnsupportedFormatError: If no parser handles the extension
        ParserError: If the parser cannot be constructed
    """
    parser_class = get_parser(extension)
    if parser_class is None:
        supported = ", ".join(sorted(_parser_registry)) or "none"
        raise UnsupportedFormatError(
            f"Unsupported file format '{extension or '<none>'}'. Supported: {supported}",
            details={"extension": extension},
        )

    try:
        return parser_class(**kwargs)
    except Exception as e:
        raise ParserError(
            f"Failed to create parser instance for '{extension}': {e}"
        ) from e


def list_supported_extensions() -> list[str]:
    """List all registered file extensions."""
    return sorted(_parser_registry)
