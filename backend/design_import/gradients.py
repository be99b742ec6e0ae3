"""Gradient references in fill/stroke values (``url(#id)``).

Only definitions tagged ``penpot:gradient`` are resolved. Gradients written by
other SVG tools are left alone and the fill/stroke falls back to solid colour
handling, which finds no colour.
"""

from __future__ import annotations

import logging
import re

from design_import.models.shape import Gradient, GradientStop
from design_import.style import parse_style
from design_import.tree import Node, flatten, ns, safe_meta, seek_by_id
from design_import.values import parse_float, to_float

logger = logging.getLogger(__name__)

_URL_RE = re.compile(r"^\s*url\(\s*#([^)\s]+)\s*\)\s*$")

_LINEAR_TAG = "linearGradient"
_RADIAL_TAG = "radialGradient"


def gradient_ref(value: object) -> str | None:
    """The id inside ``url(#id)``, or ``None`` for anything else."""
    if not isinstance(value, str):
        return None
    match = _URL_RE.match(value)
    return match.group(1) if match else None


def parse_stops(gradient_node: Node) -> list[GradientStop]:
    stops: list[GradientStop] = []
    for item in flatten(gradient_node):
        if not isinstance(item, Node) or item.tag != "stop":
            continue
        style = parse_style(item.attrs.get("style", "")) or {}
        color = item.attrs.get("stop-color", style.get("stop-color"))
        opacity = item.attrs.get("stop-opacity", style.get("stop-opacity", "1"))
        stops.append(
            GradientStop(
                color=color,
                opacity=parse_float(opacity),
                offset=parse_float(item.attrs.get("offset")),
            )
        )
    return stops


def resolve_gradient(node: Node, value: object) -> Gradient | None:
    """Authored gradient behind a ``url(#id)`` value, searched in ``node``'s subtree."""
    ref = gradient_ref(value)
    if ref is None:
        return None

    definition = seek_by_id(node, ref)
    if definition is None:
        logger.debug("Gradient #%s not found", ref)
        return None
    if ns("gradient") not in definition.attrs:
        logger.debug("Gradient #%s is not an authored gradient, ignoring", ref)
        return None

    stops = parse_stops(definition)
    attrs = definition.attrs

    if definition.tag == _LINEAR_TAG:
        return Gradient(
            type="linear",
            start_x=parse_float(attrs.get("x1")),
            start_y=parse_float(attrs.get("y1")),
            end_x=parse_float(attrs.get("x2")),
            end_y=parse_float(attrs.get("y2")),
            width=1,
            stops=stops,
        )

    if definition.tag == _RADIAL_TAG:
        # SVG's own radial model can't express these, so they travel as metadata
        return Gradient(
            type="radial",
            start_x=safe_meta(definition, "start-x", to_float),
            start_y=safe_meta(definition, "start-y", to_float),
            end_x=safe_meta(definition, "end-x", to_float),
            end_y=safe_meta(definition, "end-y", to_float),
            width=safe_meta(definition, "width", to_float),
            stops=stops,
        )

    logger.warning("Gradient #%s has unsupported tag %s", ref, definition.tag)
    return None
