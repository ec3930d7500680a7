"""Error types and source positions for the light XML parser.

Lexical malformation is never repaired: the parse aborts with an
:class:`XMLParseError` naming the delimiter that was expected and where.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SourcePosition:
    """Position of a section inside the parsed document."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column} (offset {self.offset})"


START_POSITION = SourcePosition(line=1, column=1, offset=0)


class XMLParseError(ValueError):
    """Raised when a tag section lacks a delimiter it must have.

    Attributes:
        expected: The delimiter (or construct) that was expected
        position: Where the offending section starts, if known
        section: Raw text of the offending section, if known
    """

    def __init__(
        self,
        message: str,
        expected: Optional[str] = None,
        position: Optional[SourcePosition] = None,
        section: Optional[str] = None
    ) -> None:
        self.message = message
        self.expected = expected
        self.position = position
        self.section = section
        super().__init__(self._format())

    def _format(self) -> str:
        details = []
        if self.expected is not None:
            details.append(f"expected {self.expected!r}")
        if self.position is not None:
            details.append(f"at {self.position}")
        if self.section is not None:
            details.append(f"in {self.section!r}")
        if not details:
            return self.message
        return f"{self.message}: {', '.join(details)}"
