"""Tag decomposition for the light XML parser.

Turns a single tag section into a :class:`TagSection`: its kind, element
name and attribute mapping (or the body text for comments and CDATA).

Attribute lists are split with a deliberately simple scheme: pairs are
separated by a quote followed by one space, name and value by ``="``, and
values are split on single spaces into tokens. Values containing ``" ``,
single-quoted values and attributes separated by anything but exactly one
space are not supported and come out misparsed.

One relaxation applies: when only spaces follow the element name, as in
``<br />``, the tag has no attributes instead of failing on an empty pair.

Comments must open with ``'<!-- '`` and close with ``' -->'``; the single
boundary space on each side is part of the delimiter and is not kept.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Optional, Tuple, Union

from light_xml_parser.shared.errors import SourcePosition, XMLParseError
from light_xml_parser.tokenization.slicer import (
    CDATA_CLOSE,
    CDATA_OPEN,
    COMMENT_CLOSE,
    COMMENT_OPEN,
    TAG_CLOSE,
    TAG_OPEN,
    Section,
)

DECLARATION_OPEN = "<?"
DECLARATION_CLOSE = "?>"
END_TAG_OPEN = "</"
EMPTY_TAG_CLOSE = "/>"

ATTRIBUTE_SEPARATOR = '" '
VALUE_OPEN = '="'
VALUE_CLOSE = '"'
TOKEN_SEPARATOR = " "

# Comment delimiters including their boundary space
COMMENT_BODY_OPEN = COMMENT_OPEN + " "
COMMENT_BODY_CLOSE = " " + COMMENT_CLOSE

Attributes = Dict[str, Tuple[str, ...]]


class TagKind(Enum):
    """Kinds of tag sections."""

    DECLARATION = auto()    # <?xml version="1.0"?>
    COMMENT = auto()        # <!-- ... -->
    CDATA = auto()          # <![CDATA[ ... ]]>
    EMPTY = auto()          # <name/>
    END = auto()            # </name>
    START = auto()          # <name>


@dataclass(frozen=True)
class TagSection:
    """A classified tag section.

    ``name`` and ``attributes`` are set for declarations, empty, start and
    end tags; ``text`` is set for comments and CDATA.
    """

    kind: TagKind
    name: Optional[str] = None
    attributes: Attributes = field(default_factory=dict)
    text: Optional[str] = None
    position: Optional[SourcePosition] = None


def _strip_delimiters(
    raw: str,
    prefix: str,
    suffix: str,
    construct: str,
    position: Optional[SourcePosition]
) -> str:
    if not raw.startswith(prefix):
        raise XMLParseError(
            f"Malformed {construct}", expected=prefix, position=position, section=raw
        )
    if len(raw) < len(prefix) + len(suffix) or not raw.endswith(suffix):
        raise XMLParseError(
            f"Unterminated {construct}", expected=suffix, position=position, section=raw
        )
    return raw[len(prefix):len(raw) - len(suffix)]


def split_name_and_attributes(
    body: str,
    position: Optional[SourcePosition] = None
) -> Tuple[str, Attributes]:
    """Split a stripped tag body into element name and attributes.

    Args:
        body: Tag text without its delimiters, e.g. ``a k="x y" m="z"``
        position: Source position used in error reports

    Returns:
        Tuple of element name and attribute mapping

    Raises:
        XMLParseError: If the name is empty, a pair lacks ``="`` or the last
            value lacks its closing quote

    Examples:
        >>> split_name_and_attributes('a k="x y" m="z"')
        ('a', {'k': ('x', 'y'), 'm': ('z',)})
    """
    name, separator, raw_attributes = body.partition(" ")
    if not name:
        raise XMLParseError(
            "Empty element name", expected="element name", position=position, section=body
        )

    attributes: Attributes = {}
    # "<br />" leaves only blanks after the name
    if not separator or not raw_attributes.strip(" "):
        return name, attributes

    pairs = raw_attributes.split(ATTRIBUTE_SEPARATOR)
    last_index = len(pairs) - 1
    for index, pair in enumerate(pairs):
        attribute_name, found, values = pair.partition(VALUE_OPEN)
        if not found:
            raise XMLParseError(
                "Malformed attribute", expected=VALUE_OPEN, position=position, section=body
            )
        if values.endswith(VALUE_CLOSE):
            values = values[:-len(VALUE_CLOSE)]
        elif index == last_index:
            raise XMLParseError(
                "Unterminated attribute value",
                expected=VALUE_CLOSE,
                position=position,
                section=body,
            )
        attributes[attribute_name] = tuple(values.split(TOKEN_SEPARATOR))

    return name, attributes


def decompose_tag(section: Union[Section, str]) -> TagSection:
    """Classify a tag section and extract its parts.

    Kinds are checked in this order: declaration, comment, CDATA,
    self-closing, end tag, start tag.

    Args:
        section: A tag :class:`Section` or its raw text

    Returns:
        The classified TagSection

    Raises:
        XMLParseError: If the section is missing a delimiter its kind requires
    """
    if isinstance(section, Section):
        raw, position = section.text, section.position
    else:
        raw, position = section, None

    if raw.startswith(DECLARATION_OPEN):
        body = _strip_delimiters(
            raw, DECLARATION_OPEN, DECLARATION_CLOSE, "declaration", position
        )
        name, attributes = split_name_and_attributes(body, position)
        return TagSection(TagKind.DECLARATION, name, attributes, position=position)

    if raw.startswith(COMMENT_OPEN):
        body = _strip_delimiters(
            raw, COMMENT_BODY_OPEN, COMMENT_BODY_CLOSE, "comment", position
        )
        return TagSection(TagKind.COMMENT, text=body, position=position)

    if raw.startswith(CDATA_OPEN):
        body = _strip_delimiters(raw, CDATA_OPEN, CDATA_CLOSE, "CDATA section", position)
        return TagSection(TagKind.CDATA, text=body, position=position)

    if raw.endswith(EMPTY_TAG_CLOSE):
        body = _strip_delimiters(raw, TAG_OPEN, EMPTY_TAG_CLOSE, "empty-element tag", position)
        name, attributes = split_name_and_attributes(body, position)
        return TagSection(TagKind.EMPTY, name, attributes, position=position)

    if raw.startswith(END_TAG_OPEN):
        name = _strip_delimiters(raw, END_TAG_OPEN, TAG_CLOSE, "end tag", position)
        if not name:
            raise XMLParseError(
                "Empty element name", expected="element name", position=position, section=raw
            )
        return TagSection(TagKind.END, name, position=position)

    body = _strip_delimiters(raw, TAG_OPEN, TAG_CLOSE, "start tag", position)
    name, attributes = split_name_and_attributes(body, position)
    return TagSection(TagKind.START, name, attributes, position=position)
