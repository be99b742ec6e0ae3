"""XML tree model, shape traversal and metadata lookup.

A design export is an SVG document where every shape element carries a
``penpot:shape`` child (the shape descriptor) holding its declared type and the
metadata plain SVG cannot express. ``flatten`` walks the tree depth-first and
emits a ``Close`` marker right after the last descendant of each shape, so a
consumer can rebuild the shape hierarchy with a stack instead of recursion.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TypeVar, Union

from design_import.errors import AttributeParseError, UnknownShapeType
from design_import.models.shape import ShapeType

logger = logging.getLogger(__name__)

NAMESPACE = "penpot"
DESCRIPTOR_TAG = f"{NAMESPACE}:shape"

T = TypeVar("T")


@dataclass(frozen=True)
class Node:
    """One XML element. ``content`` is ``None`` for a leaf."""

    tag: str
    attrs: Mapping[str, str] = field(default_factory=dict)
    content: tuple[Node | str, ...] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "attrs", MappingProxyType(dict(self.attrs)))
        if self.content is not None:
            object.__setattr__(self, "content", tuple(self.content))

    @property
    def elements(self) -> list[Node]:
        """Element children, text chunks skipped."""
        return [c for c in self.content or () if isinstance(c, Node)]


@dataclass(frozen=True)
class Close:
    """Synthetic end-of-subtree marker. ``type`` is ``None`` for unknown kinds."""

    type: ShapeType | None


TreeItem = Union[Node, Close, str]


def ns(name: str) -> str:
    """Qualified metadata name: ``ns("x") == "penpot:x"``."""
    return f"{NAMESPACE}:{name}"


def valid_document(root: Node) -> bool:
    return f"xmlns:{NAMESPACE}" in root.attrs


def is_branch(item: TreeItem) -> bool:
    return isinstance(item, Node) and item.content is not None


def is_close_marker(item: object) -> bool:
    return isinstance(item, Close)


def shape_descriptor(node: Node, tag: str | None = None) -> Node | None:
    """The node's ``penpot:shape`` child, or that child's first ``tag`` child."""
    if not isinstance(node, Node):
        return None
    descriptor = next((c for c in node.elements if c.tag == DESCRIPTOR_TAG), None)
    if descriptor is None or tag is None:
        return descriptor
    return next((c for c in descriptor.elements if c.tag == tag), None)


def is_shape(item: TreeItem) -> bool:
    return isinstance(item, Close) or shape_descriptor(item) is not None


def shape_type(item: TreeItem) -> ShapeType:
    """Declared type of a shape or close marker. Raises ``UnknownShapeType``."""
    if isinstance(item, Close):
        if item.type is None:
            raise UnknownShapeType(None)
        return item.type

    declared = read_meta(item, "type")
    try:
        return ShapeType(declared)
    except ValueError:
        raise UnknownShapeType(declared) from None


def _close_for(node: Node) -> Close:
    try:
        return Close(shape_type(node))
    except UnknownShapeType as e:
        logger.debug("Traversal: %s", e)
        return Close(None)


def children_of(item: TreeItem) -> list[TreeItem]:
    if not is_branch(item):
        return []
    children: list[TreeItem] = list(item.content)
    if is_shape(item):
        children.append(_close_for(item))
    return children


def flatten(root: TreeItem) -> Iterator[TreeItem]:
    """Lazy depth-first pre-order walk, ``root`` first, close markers included."""
    stack: list[TreeItem] = [root]
    while stack:
        item = stack.pop()
        yield item
        stack.extend(reversed(children_of(item)))


def read_meta(
    node: Node | None,
    name: str,
    decode: Callable[[str], T] | None = None,
) -> T | str | None:
    """Read ``penpot:<name>`` from the node, falling back to its descriptor.

    Raises ``AttributeParseError`` when ``decode`` rejects the text.
    """
    if not isinstance(node, Node):
        return None

    key = ns(name)
    value = node.attrs.get(key)
    if value is None:
        descriptor = shape_descriptor(node)
        if descriptor is not None:
            value = descriptor.attrs.get(key)
    if value is None:
        return None
    if decode is None:
        return value
    try:
        return decode(value)
    except (ValueError, TypeError) as e:
        raise AttributeParseError(key, value, str(e)) from e


def safe_meta(node: Node | None, name: str, decode: Callable[[str], Any] | None = None) -> Any:
    """``read_meta`` that logs and returns ``None`` for undecodable values."""
    try:
        return read_meta(node, name, decode)
    except AttributeParseError as e:
        logger.warning("Ignoring metadata: %s", e)
        return None


def seek_by_id(root: Node, element_id: str) -> Node | None:
    """First element in ``root``'s subtree whose ``id`` attribute matches."""
    for item in flatten(root):
        if isinstance(item, Node) and item.attrs.get("id") == element_id:
            return item
    return None
