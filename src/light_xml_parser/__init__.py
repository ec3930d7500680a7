"""Light XML Parser.

A minimal XML parser that turns known, well-formed XML text into a tree of
typed nodes. No DTD, namespaces, entity expansion or encoding detection.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_file()
- Level 2: Configured parser - XMLParser class with ParserConfig
- Level 3: Components - iter_sections(), decompose_tag(), TreeAssembler
"""

__version__ = "0.1.0"
__author__ = "Light XML Parser Team"

from .api import XMLParser, parse, parse_file
from .shared import ParseMetrics, ParserConfig, SourcePosition, XMLParseError
from .tokenization import decompose_tag, iter_sections
from .tree import Cdata, Comment, Element, EmptyElement, Node, TreeAssembler

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_file",

    # Level 2: Configured parser
    "XMLParser",
    "ParserConfig",
    "ParseMetrics",

    # Level 3: Components
    "TreeAssembler",
    "decompose_tag",
    "iter_sections",

    # Node types
    "Cdata",
    "Comment",
    "Element",
    "EmptyElement",
    "Node",

    # Errors
    "SourcePosition",
    "XMLParseError",
]
