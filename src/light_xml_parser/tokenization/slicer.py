"""Lexical slicer for the light XML parser.

The slicer cuts a document into sections: every section is either a single
tag (``<...>``) or a run of text. Cutting happens right after each ``>``;
a piece that does not start with ``<`` is split at its first ``<`` into a
content section and a tag section. Comment and CDATA openers extend their
section up to the matching ``-->`` / ``]]>`` so their bodies may contain
``>`` and ``<``.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, List, Tuple

from light_xml_parser.shared.config import DEFAULT_BLANK_CHARACTERS
from light_xml_parser.shared.errors import START_POSITION, SourcePosition

TAG_OPEN = "<"
TAG_CLOSE = ">"
COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"


class SectionKind(Enum):
    """Kinds of sections produced by the slicer."""

    TAG = auto()        # Everything from "<" up to and including its terminator
    CONTENT = auto()    # Text between tags


@dataclass(frozen=True)
class Section:
    """One lexical unit of the document."""

    kind: SectionKind
    text: str
    position: SourcePosition = START_POSITION

    @property
    def is_tag(self) -> bool:
        """Check if this section is a tag section."""
        return self.kind is SectionKind.TAG

    def is_blank(self, blank_characters: str = DEFAULT_BLANK_CHARACTERS) -> bool:
        """Check if this section consists only of blank characters."""
        return all(char in blank_characters for char in self.text)


def _tag_end(text: str, start: int) -> int:
    """Return the index just past the terminator of the tag starting at ``start``.

    A tag without terminator runs to the end of the document.
    """
    if text.startswith(COMMENT_OPEN, start):
        terminator = COMMENT_CLOSE
        search_from = start + len(COMMENT_OPEN)
    elif text.startswith(CDATA_OPEN, start):
        terminator = CDATA_CLOSE
        search_from = start + len(CDATA_OPEN)
    else:
        terminator = TAG_CLOSE
        search_from = start + len(TAG_OPEN)

    index = text.find(terminator, search_from)
    if index == -1:
        return len(text)
    return index + len(terminator)


def _content_end(text: str, start: int) -> int:
    """Return the index just past the text run starting at ``start``."""
    next_open = text.find(TAG_OPEN, start)
    next_close = text.find(TAG_CLOSE, start)

    # A stray ">" ends the piece before any "<" is seen
    if next_close != -1 and (next_open == -1 or next_close < next_open):
        return next_close + 1
    if next_open != -1:
        return next_open
    return len(text)


def _advance(line: int, column: int, chunk: str) -> Tuple[int, int]:
    newlines = chunk.count("\n")
    if newlines:
        return line + newlines, len(chunk) - chunk.rfind("\n")
    return line, column + len(chunk)


def iter_sections(
    text: str,
    blank_characters: str = DEFAULT_BLANK_CHARACTERS,
    keep_blank: bool = False
) -> Iterator[Section]:
    """Yield the sections of ``text`` in document order.

    Args:
        text: The whole document
        blank_characters: Characters that make up droppable text runs
        keep_blank: Also yield blank text runs, so that the section texts
            concatenate back to ``text``

    Yields:
        Section objects carrying their source position
    """
    position = 0
    line = 1
    column = 1
    length = len(text)

    while position < length:
        if text.startswith(TAG_OPEN, position):
            kind = SectionKind.TAG
            end = _tag_end(text, position)
        else:
            kind = SectionKind.CONTENT
            end = _content_end(text, position)

        chunk = text[position:end]
        section = Section(kind, chunk, SourcePosition(line, column, position))
        if keep_blank or section.is_tag or not section.is_blank(blank_characters):
            yield section

        line, column = _advance(line, column, chunk)
        position = end


def slice_sections(
    text: str,
    blank_characters: str = DEFAULT_BLANK_CHARACTERS,
    keep_blank: bool = False
) -> List[Section]:
    """Slice ``text`` into a list of sections. See :func:`iter_sections`."""
    return list(iter_sections(text, blank_characters, keep_blank))
