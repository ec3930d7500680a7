"""Tokenization layer for the light XML parser.

Key Components:
    iter_sections: Lexical slicer cutting a document into tag and text sections
    Section: One lexical unit with its source position
    decompose_tag: Classifies a tag section and extracts name and attributes
    TagSection: Result of decomposing a tag
"""

from .decomposer import (
    Attributes,
    TagKind,
    TagSection,
    decompose_tag,
    split_name_and_attributes,
)
from .slicer import (
    Section,
    SectionKind,
    iter_sections,
    slice_sections,
)

__all__ = [
    "Attributes",
    "Section",
    "SectionKind",
    "TagKind",
    "TagSection",
    "decompose_tag",
    "iter_sections",
    "slice_sections",
    "split_name_and_attributes",
]
