"""Node types produced by the light XML parser.

All nodes are immutable. An :class:`Element` keeps its direct text runs
(``contents``) and its nested nodes (``children``) in two separate
sequences; each is in document order, but their relative interleaving is not
recorded.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from light_xml_parser.tokenization.decomposer import Attributes


def _freeze_attributes(attributes: Mapping[str, Sequence[str]]) -> Attributes:
    return {name: tuple(values) for name, values in attributes.items()}


class _AttributeAccess:
    """Read-only attribute helpers shared by Element and EmptyElement."""

    name: str
    attributes: Attributes

    def get_attribute(
        self, name: str, default: Optional[Tuple[str, ...]] = None
    ) -> Optional[Tuple[str, ...]]:
        """Get the value tokens of an attribute with optional default."""
        return self.attributes.get(name, default)

    def get_attribute_text(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get an attribute's value tokens joined by single spaces."""
        values = self.attributes.get(name)
        if values is None:
            return default
        return " ".join(values)

    def has_attribute(self, name: str) -> bool:
        """Check if the element has a specific attribute."""
        return name in self.attributes

    def _attributes_dict(self) -> Dict[str, List[str]]:
        return {name: list(values) for name, values in self.attributes.items()}


@dataclass(frozen=True)
class EmptyElement(_AttributeAccess):
    """A self-closing tag or the XML declaration."""

    name: str
    attributes: Attributes = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate the name and freeze attribute values."""
        if not self.name:
            raise ValueError("Element name cannot be empty")
        object.__setattr__(self, "attributes", _freeze_attributes(self.attributes))

    def iter(self) -> Iterator["Node"]:
        """Yield this node."""
        yield self

    def to_dict(self) -> Dict[str, Any]:
        """Convert node to dictionary representation."""
        return {
            "type": "empty_element",
            "name": self.name,
            "attributes": self._attributes_dict(),
        }


@dataclass(frozen=True)
class Comment:
    """Text of a ``<!-- ... -->`` block."""

    text: str

    def iter(self) -> Iterator["Node"]:
        """Yield this node."""
        yield self

    def to_dict(self) -> Dict[str, Any]:
        """Convert node to dictionary representation."""
        return {"type": "comment", "text": self.text}


@dataclass(frozen=True)
class Cdata:
    """Verbatim text of a ``<![CDATA[ ... ]]>`` block."""

    text: str

    def iter(self) -> Iterator["Node"]:
        """Yield this node."""
        yield self

    def to_dict(self) -> Dict[str, Any]:
        """Convert node to dictionary representation."""
        return {"type": "cdata", "text": self.text}


@dataclass(frozen=True)
class Element(_AttributeAccess):
    """A start tag closed by its matching end tag.

    Provides read-only navigation over the nested nodes. Lists passed for
    ``contents`` or ``children`` are stored as tuples.
    """

    name: str
    attributes: Attributes = field(default_factory=dict)
    contents: Tuple[str, ...] = ()
    children: Tuple["Node", ...] = ()

    def __post_init__(self) -> None:
        """Validate the name and freeze the sequences."""
        if not self.name:
            raise ValueError("Element name cannot be empty")
        object.__setattr__(self, "attributes", _freeze_attributes(self.attributes))
        object.__setattr__(self, "contents", tuple(self.contents))
        object.__setattr__(self, "children", tuple(self.children))

    @property
    def text(self) -> str:
        """Direct text runs concatenated in document order."""
        return "".join(self.contents)

    @property
    def element_children(self) -> List[Union["Element", EmptyElement]]:
        """Children that are elements, skipping comments and CDATA."""
        return [
            child for child in self.children
            if isinstance(child, (Element, EmptyElement))
        ]

    def find_child(self, name: str) -> Optional[Union["Element", EmptyElement]]:
        """Find first direct child element with matching name."""
        for child in self.element_children:
            if child.name == name:
                return child
        return None

    def find_children(self, name: str) -> List[Union["Element", EmptyElement]]:
        """Find all direct child elements with matching name."""
        return [child for child in self.element_children if child.name == name]

    def find(self, name: str) -> Optional[Union["Element", EmptyElement]]:
        """Find first descendant element with matching name (depth-first)."""
        for node in self.iter():
            if node is not self and isinstance(node, (Element, EmptyElement)):
                if node.name == name:
                    return node
        return None

    def find_all(self, name: str) -> List[Union["Element", EmptyElement]]:
        """Find all descendant elements with matching name in document order."""
        return [
            node for node in self.iter()
            if node is not self
            and isinstance(node, (Element, EmptyElement))
            and node.name == name
        ]

    def iter(self) -> Iterator["Node"]:
        """Yield this element and all its descendants in document order."""
        pending: List[Node] = [self]
        while pending:
            node = pending.pop()
            yield node
            if isinstance(node, Element):
                pending.extend(reversed(node.children))

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation."""
        root = self._shallow_dict()
        pending = [(self, root)]
        while pending:
            element, data = pending.pop()
            for child in element.children:
                if isinstance(child, Element):
                    child_data = child._shallow_dict()
                    pending.append((child, child_data))
                else:
                    child_data = child.to_dict()
                data["children"].append(child_data)
        return root

    def _shallow_dict(self) -> Dict[str, Any]:
        return {
            "type": "element",
            "name": self.name,
            "attributes": self._attributes_dict(),
            "contents": list(self.contents),
            "children": [],
        }


Node = Union[Element, EmptyElement, Comment, Cdata]


def nodes_to_dicts(nodes: Sequence[Node]) -> List[Dict[str, Any]]:
    """Convert a parse result to a list of dictionaries."""
    return [node.to_dict() for node in nodes]


def format_tree(nodes: Sequence[Node], indent: str = "  ") -> str:
    """Render nodes as an indented outline, one node per line."""
    lines: List[str] = []
    pending = [(node, 0) for node in reversed(nodes)]
    while pending:
        node, depth = pending.pop()
        prefix = indent * depth
        if isinstance(node, (Element, EmptyElement)):
            attributes = "".join(
                f' {name}="{" ".join(values)}"' for name, values in node.attributes.items()
            )
            marker = "" if isinstance(node, Element) else "/"
            lines.append(f"{prefix}<{node.name}{attributes}{marker}>")
            if isinstance(node, Element):
                for content in node.contents:
                    lines.append(f"{prefix}{indent}{content.strip()!r}")
                pending.extend((child, depth + 1) for child in reversed(node.children))
        elif isinstance(node, Comment):
            lines.append(f"{prefix}<!-- {node.text} -->")
        else:
            lines.append(f"{prefix}<![CDATA[{node.text}]]>")
    return "\n".join(lines)
