"""Tree layer for the light XML parser.

Key Components:
    TreeAssembler: Stack-based reduction of sections into nodes
    Element, EmptyElement, Comment, Cdata: The node types of a parse result
"""

from .assembler import (
    FinishedElement,
    OpenFrame,
    PendingContent,
    PendingNode,
    StackEntry,
    TreeAssembler,
    assemble,
)
from .nodes import (
    Cdata,
    Comment,
    Element,
    EmptyElement,
    Node,
    format_tree,
    nodes_to_dicts,
)

__all__ = [
    "Cdata",
    "Comment",
    "Element",
    "EmptyElement",
    "FinishedElement",
    "Node",
    "OpenFrame",
    "PendingContent",
    "PendingNode",
    "StackEntry",
    "TreeAssembler",
    "assemble",
    "format_tree",
    "nodes_to_dicts",
]
