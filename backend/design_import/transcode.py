"""Raw SVG passthrough content.

svg-raw shapes keep foreign markup verbatim. Before handing it to the renderer
the markup is converted to the renderer's property naming: inline styles
become mappings and dashed/namespaced names become camel case
(``stroke-width`` -> ``strokeWidth``, ``xlink:href`` -> ``xlinkHref``).
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from design_import.models.shape import SvgRawContent
from design_import.style import parse_style
from design_import.tree import DESCRIPTOR_TAG, NAMESPACE, Node, ns, shape_descriptor

_WORD_SEP_RE = re.compile(r"[-:]")

_ATTR_RENAMES = {"class": "className"}
_VERBATIM_PREFIXES = ("data-", "aria-")


def _camel(words: list[str]) -> str:
    head, *tail = words
    return head + "".join(w[:1].upper() + w[1:] for w in tail)


def attr_key(key: str) -> str:
    if key in _ATTR_RENAMES:
        return _ATTR_RENAMES[key]
    if key.startswith(_VERBATIM_PREFIXES):
        return key
    words = [w for w in _WORD_SEP_RE.split(key) if w]
    return _camel(words) if words else key


def style_key(key: str) -> str:
    if key.startswith("--"):
        return key
    if key.startswith("-"):
        # vendor prefix: -webkit-mask -> WebkitMask
        words = [w for w in key[1:].split("-") if w]
        return "".join(w[:1].upper() + w[1:] for w in words)
    words = [w for w in key.split("-") if w]
    return _camel(words) if words else key


def transcode(value: Any) -> Any:
    """Recursively rename a markup value into the renderer's conventions."""
    if isinstance(value, Node):
        return {
            "tag": value.tag,
            "attrs": transcode_attrs(value.attrs),
            "content": None if value.content is None else [transcode(c) for c in value.content],
        }
    if isinstance(value, Mapping):
        return transcode_attrs(value)
    if isinstance(value, (list, tuple)):
        return [transcode(v) for v in value]
    return value


def transcode_attrs(attrs: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, val in attrs.items():
        if key == "style":
            style = parse_style(val)
            if isinstance(style, Mapping):
                result["style"] = {style_key(k): v for k, v in style.items()}
            else:
                result["style"] = style
        else:
            result[attr_key(key)] = transcode(val)
    return result


def without_namespace(attrs: Mapping[str, str]) -> dict[str, str]:
    prefix = f"{NAMESPACE}:"
    return {k: v for k, v in attrs.items() if not k.startswith(prefix)}


def _last_element(node: Node | None) -> Node | None:
    if node is None:
        return None
    elements = [c for c in node.elements if c.tag != DESCRIPTOR_TAG]
    return elements[-1] if elements else None


def raw_element(node: Node, tag: str | None) -> Node | None:
    """The foreign element an svg-raw shape wraps.

    ``<svg>`` content sits one level deeper than other passthrough tags.
    """
    inner = _last_element(node)
    return _last_element(inner) if tag == "svg" else inner


def svg_content(node: Node) -> SvgRawContent | None:
    """Transcoded content of an svg-raw shape; ``None`` without a content descriptor."""
    descriptor = shape_descriptor(node, ns("svg-content"))
    if descriptor is None:
        return None

    tag = descriptor.attrs.get(ns("tag"))
    grandchild = _last_element(_last_element(node))

    if tag == "svg":
        content = transcode(grandchild) if grandchild is not None else None
    elif tag == "text":
        content = grandchild
    else:
        content = None

    return SvgRawContent(tag=tag, attrs=without_namespace(descriptor.attrs), content=content)
