"""Stack-based tree assembly for the light XML parser.

The assembler consumes sections in document order and reduces them into
nodes with one explicit stack. A start tag pushes an open frame; an end tag
pops entries until the frame with the same name comes off, and everything
popped on the way becomes that element's contents and children. Open frames
with another name that are popped on the way are dropped without error, so
mismatched nesting yields an unexpected tree instead of a failure.

Completed elements stay on the stack until finish() drains it. Leaf nodes
go straight to the output only while the stack is empty. Text outside every
element is pushed as well and is dropped by the drain.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union

from light_xml_parser.shared import (
    ParseMetrics,
    ParserConfig,
    XMLParseError,
    get_logger,
)
from light_xml_parser.tokenization import (
    Attributes,
    Section,
    TagKind,
    TagSection,
    decompose_tag,
)
from light_xml_parser.tree.nodes import Cdata, Comment, Element, EmptyElement, Node


@dataclass(frozen=True)
class OpenFrame:
    """A start tag still waiting for its end tag."""

    name: str
    attributes: Attributes = field(default_factory=dict)


@dataclass(frozen=True)
class FinishedElement:
    """An element whose end tag has been seen."""

    element: Element


@dataclass(frozen=True)
class PendingNode:
    """An empty element, declaration, comment or CDATA inside an open element."""

    node: Union[EmptyElement, Comment, Cdata]


@dataclass(frozen=True)
class PendingContent:
    """A text run waiting for its enclosing element."""

    text: str


StackEntry = Union[OpenFrame, FinishedElement, PendingNode, PendingContent]


class TreeAssembler:
    """Reduces a stream of sections into top-level nodes.

    Usage:
        >>> assembler = TreeAssembler()
        >>> for section in iter_sections('<a>text</a>'):
        ...     assembler.feed(section)
        >>> assembler.finish()
        [Element(name='a', attributes={}, contents=('text',), children=())]
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None,
        metrics: Optional[ParseMetrics] = None
    ) -> None:
        """Initialize the assembler.

        Args:
            config: Parser configuration (defaults to ParserConfig())
            correlation_id: Optional correlation ID for logging
            metrics: Metrics object to update, a fresh one if omitted
        """
        self.config = config or ParserConfig()
        self.logger = get_logger(__name__, correlation_id, "tree_assembler")
        self.metrics = metrics if metrics is not None else ParseMetrics()
        self._stack: List[StackEntry] = []
        self._output: List[Node] = []
        self._open_frames = 0
        # Open frame names still on the stack, so end tags need no stack scan
        self._open_names: Counter = Counter()
        self._finished = False

    @property
    def depth(self) -> int:
        """Number of currently open elements."""
        return self._open_frames

    @property
    def stack(self) -> List[StackEntry]:
        """Snapshot of the pending stack, bottom first."""
        return list(self._stack)

    def feed(self, section: Section) -> None:
        """Process one section.

        Raises:
            XMLParseError: If a tag section is malformed or the nesting depth
                limit is exceeded
            RuntimeError: If called after finish()
        """
        if self._finished:
            raise RuntimeError("Cannot feed sections after finish()")

        self.metrics.sections_processed += 1
        if not section.is_tag:
            self._push_content(section.text)
            return

        tag = decompose_tag(section)
        if tag.kind is TagKind.START:
            self._open(tag)
        elif tag.kind is TagKind.END:
            self._close(tag)
        else:
            self._place(_leaf_node(tag))

    def finish(self) -> List[Node]:
        """Drain the stack and return the top-level nodes.

        Finished elements left on the stack (below an unterminated element)
        are appended in stack order; everything else is discarded.
        """
        if self._finished:
            return list(self._output)
        self._finished = True

        discarded = 0
        for entry in self._stack:
            if isinstance(entry, FinishedElement):
                self._output.append(entry.element)
            else:
                discarded += 1

        if discarded:
            self.metrics.discarded_entries += discarded
            self.logger.warning(
                "Discarding unterminated entries at end of input",
                extra={"discarded": discarded, "open_frames": self._open_frames}
            )
        self._stack.clear()
        self._open_frames = 0
        self._open_names.clear()
        self.metrics.nodes_emitted = len(self._output)
        return list(self._output)

    def _push_content(self, text: str) -> None:
        if self.config.is_blank(text):
            return
        if self._open_frames == 0:
            # No enclosing element: the entry is discarded when the stack drains
            self.metrics.orphaned_content += 1
            self.logger.debug("Text outside of any element", extra={"text": text})
        self._stack.append(PendingContent(text))

    def _place(self, node: Union[EmptyElement, Comment, Cdata]) -> None:
        if self._stack:
            self._stack.append(PendingNode(node))
        else:
            self._output.append(node)

    def _open(self, tag: TagSection) -> None:
        max_depth = self.config.max_depth
        if max_depth is not None and self._open_frames >= max_depth:
            raise XMLParseError(
                "Maximum nesting depth exceeded",
                expected=f"at most {max_depth} open elements",
                position=tag.position,
                section=tag.name,
            )
        self._stack.append(OpenFrame(tag.name, tag.attributes))
        self._open_frames += 1
        self._open_names[tag.name] += 1

    def _close(self, tag: TagSection) -> None:
        name = tag.name
        if not self._open_names[name]:
            self.metrics.unmatched_end_tags += 1
            self.logger.warning(
                "Ignoring end tag without matching start tag",
                extra={"tag_name": name, "position": str(tag.position)}
            )
            return

        contents: List[str] = []
        children: List[Node] = []
        while True:
            entry = self._stack.pop()
            if isinstance(entry, OpenFrame):
                self._open_frames -= 1
                self._open_names[entry.name] -= 1
                if entry.name == name:
                    break
                self.metrics.discarded_entries += 1
                self.logger.debug(
                    "Discarding unclosed element inside mismatched end tag",
                    extra={"tag_name": entry.name, "closed_by": name}
                )
            elif isinstance(entry, PendingContent):
                contents.append(entry.text)
            elif isinstance(entry, FinishedElement):
                children.append(entry.element)
            else:
                children.append(entry.node)

        # Entries were popped last-in-first-out
        contents.reverse()
        children.reverse()
        # Finished elements reach the output only when the stack drains
        element = Element(entry.name, entry.attributes, contents, children)
        self._stack.append(FinishedElement(element))


def _leaf_node(tag: TagSection) -> Union[EmptyElement, Comment, Cdata]:
    if tag.kind is TagKind.COMMENT:
        return Comment(tag.text)
    if tag.kind is TagKind.CDATA:
        return Cdata(tag.text)
    # Declarations are modelled exactly like self-closing tags
    return EmptyElement(tag.name, tag.attributes)


def assemble(
    sections: Iterable[Section],
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> List[Node]:
    """Assemble an iterable of sections into top-level nodes."""
    assembler = TreeAssembler(config, correlation_id)
    for section in sections:
        assembler.feed(section)
    return assembler.finish()
