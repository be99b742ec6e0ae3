"""XML reader — serialized document -> immutable ``Node`` tree.

ElementTree expands prefixes into ``{uri}local`` names. The parser works with
the prefixed spelling the export uses (``penpot:shape``, ``xlink:href``), so
names are mapped back through the document's own namespace declarations and
those declarations are restored as ``xmlns:*`` attributes on the root.
"""

from __future__ import annotations

import io
import logging
import xml.etree.ElementTree as ET

from design_import.errors import InvalidDocument
from design_import.tree import Node

logger = logging.getLogger(__name__)

_WELL_KNOWN = {
    "http://www.w3.org/XML/1998/namespace": "xml",
    "http://www.w3.org/1999/xlink": "xlink",
}


def _qualify(name: str, prefixes: dict[str, str]) -> str:
    if not name.startswith("{"):
        return name
    uri, _, local = name[1:].partition("}")
    prefix = prefixes.get(uri)
    return f"{prefix}:{local}" if prefix else local


def _convert(element: ET.Element, prefixes: dict[str, str]) -> Node:
    children: list[Node | str] = []
    if element.text and element.text.strip():
        children.append(element.text)
    for child in element:
        children.append(_convert(child, prefixes))
        if child.tail and child.tail.strip():
            children.append(child.tail)

    attrs = {_qualify(k, prefixes): v for k, v in element.attrib.items()}
    has_content = len(element) > 0 or bool(element.text and element.text.strip())
    return Node(
        tag=_qualify(element.tag, prefixes),
        attrs=attrs,
        content=tuple(children) if has_content else None,
    )


def read_document(text: str | bytes) -> Node:
    """Parse XML text into a ``Node`` tree. Raises ``InvalidDocument``."""
    data = text.encode("utf-8") if isinstance(text, str) else text

    declarations: dict[str, str] = {}
    try:
        for _, (prefix, uri) in ET.iterparse(io.BytesIO(data), events=("start-ns",)):
            declarations.setdefault(prefix, uri)
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise InvalidDocument(f"Malformed XML: {e}") from e

    prefixes = dict(_WELL_KNOWN)
    prefixes.update({uri: prefix for prefix, uri in declarations.items()})

    node = _convert(root, prefixes)
    ns_attrs = {
        (f"xmlns:{prefix}" if prefix else "xmlns"): uri for prefix, uri in declarations.items()
    }
    logger.debug("Read document <%s> with %d namespace(s)", node.tag, len(ns_attrs))
    return Node(tag=node.tag, attrs={**ns_attrs, **node.attrs}, content=node.content)
