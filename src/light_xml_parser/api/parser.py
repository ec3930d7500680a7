"""Parser API for the light XML parser.

Progressive disclosure from the module-level :func:`parse` function to the
configurable :class:`XMLParser` class. Malformed tags abort the parse with
:class:`~light_xml_parser.shared.errors.XMLParseError`; there is no
best-effort result.
"""

import time
from pathlib import Path
from typing import List, Optional, Union

from light_xml_parser.shared import (
    ParseMetrics,
    ParserConfig,
    XMLParseError,
    get_logger,
)
from light_xml_parser.tokenization import iter_sections
from light_xml_parser.tree import Node, TreeAssembler

# Constants for API operations
PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000  # Milliseconds per second conversion


class XMLParser:
    """Configurable XML parser.

    Examples:
        >>> parser = XMLParser(ParserConfig.lenient_whitespace())
        >>> nodes = parser.parse('<a>\\t<b/></a>')
        >>> nodes[0].contents
        ()
        >>> parser.last_metrics.sections_processed
        3
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the parser.

        Args:
            config: Parser configuration (defaults to ParserConfig.default())
            correlation_id: Optional correlation ID attached to log records
        """
        self.config = config or ParserConfig.default()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "parser")
        self.last_metrics: Optional[ParseMetrics] = None

    def parse(self, document_text: str) -> List[Node]:
        """Parse a document into its top-level nodes.

        Args:
            document_text: The complete XML document

        Returns:
            Top-level nodes in document order

        Raises:
            TypeError: If document_text is not a string
            XMLParseError: If a tag is missing one of its delimiters
        """
        if not isinstance(document_text, str):
            raise TypeError(
                f"document_text must be a str, not {type(document_text).__name__}"
            )

        start_time = time.time()
        metrics = ParseMetrics(characters_processed=len(document_text))
        assembler = TreeAssembler(self.config, self.correlation_id, metrics)

        self.logger.debug(
            "Starting parse",
            extra={
                "content_length": len(document_text),
                "preview": document_text[:PREVIEW_LENGTH],
            }
        )

        try:
            for section in iter_sections(document_text, self.config.blank_characters):
                assembler.feed(section)
            nodes = assembler.finish()
        except XMLParseError as e:
            self.logger.error(
                "Parse aborted on malformed markup",
                extra={
                    "expected": e.expected,
                    "position": str(e.position) if e.position else None,
                },
                exc_info=False
            )
            raise

        metrics.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
        if self.config.collect_metrics:
            self.last_metrics = metrics

        self.logger.debug("Parse completed", extra=metrics.to_dict())
        return nodes

    def parse_file(
        self, file_path: Union[str, Path], encoding: str = "utf-8"
    ) -> List[Node]:
        """Read a file with an explicit encoding and parse it.

        Raises:
            OSError: If the file cannot be read
            XMLParseError: If a tag is missing one of its delimiters
        """
        path_obj = Path(file_path)
        self.logger.debug(
            "Reading file", extra={"file_path": str(path_obj), "encoding": encoding}
        )
        return self.parse(path_obj.read_text(encoding=encoding))


def parse(document_text: str, correlation_id: Optional[str] = None) -> List[Node]:
    """Parse an XML document into an ordered list of top-level nodes.

    Args:
        document_text: XML content as string
        correlation_id: Optional correlation ID attached to log records

    Returns:
        Top-level nodes in document order

    Examples:
        >>> parse('<a k="x y" m="z">text</a>')
        [Element(name='a', attributes={'k': ('x', 'y'), 'm': ('z',)}, contents=('text',), children=())]
    """
    return XMLParser(correlation_id=correlation_id).parse(document_text)


def parse_file(
    file_path: Union[str, Path],
    encoding: str = "utf-8",
    correlation_id: Optional[str] = None
) -> List[Node]:
    """Parse an XML file. The encoding is never detected, only applied."""
    return XMLParser(correlation_id=correlation_id).parse_file(file_path, encoding)
