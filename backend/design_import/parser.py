"""Shape parser — turns one shape node into a ``ShapeProps`` bag.

``parse_data`` computes the raw SVG attribute view of the node once and then
threads an immutable ``ShapeProps`` through a fixed sequence of stages:

    common -> position -> fill -> stroke -> layer options -> shadows -> blur
    -> exports -> svg attrs -> kind extras

Later stages may read what common/position set, never the other way round.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator, Mapping
from typing import Any
from uuid import UUID, uuid4

from design_import import geometry as geom
from design_import.errors import UnknownShapeType
from design_import.gradients import resolve_gradient
from design_import.models.shape import (
    BlendMode,
    Blur,
    Export,
    ImageMetadata,
    Point,
    Shadow,
    ShadowColor,
    ShapeProps,
    ShapeType,
    SvgViewbox,
)
from design_import.style import parse_style
from design_import.transcode import raw_element, svg_content
from design_import.tree import (
    DESCRIPTOR_TAG,
    Node,
    flatten,
    is_close_marker,
    is_shape,
    ns,
    safe_meta,
    shape_descriptor,
)
from design_import.values import decode_json, is_color, parse_float, str_to_bool, to_float

logger = logging.getLogger(__name__)

IdFactory = Callable[[], UUID]

# Elements whose attributes describe the geometry of their enclosing shape
_DATA_TAGS = {"ellipse", "rect", "path", "text", "foreignObject", "image"}
_SEARCH_DATA = {ShapeType.RECT, ShapeType.IMAGE, ShapeType.PATH, ShapeType.TEXT, ShapeType.CIRCLE}
_HAS_POSITION = {ShapeType.FRAME, ShapeType.RECT, ShapeType.IMAGE, ShapeType.TEXT}

_UUID_PREFIX_RE = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}-"
)


# ── Raw SVG attribute view ────────────────────────────────────────────────


def _local_elements(node: Node) -> Iterator[Node]:
    """Descendant elements of this shape, not entering descriptors or child shapes."""
    for child in node.elements:
        if child.tag == DESCRIPTOR_TAG or is_shape(child):
            continue
        yield child
        yield from _local_elements(child)


def _add_attrs(data: dict[str, Any], attrs: Mapping[str, str]) -> dict[str, Any]:
    for key, value in attrs.items():
        if key in ("style", "data-style"):
            data["style"] = {**data.get("style", {}), **parse_style(value)}
        else:
            data[key] = value
    return data


def _with_style_fallback(data: dict[str, Any]) -> dict[str, Any]:
    style = data.get("style")
    if isinstance(style, Mapping):
        for key, value in style.items():
            data.setdefault(key, value)
    return data


def get_svg_data(shape_type: ShapeType, node: Node) -> dict[str, Any]:
    """Raw attributes the geometry and style stages read, flattened into one dict."""
    data = _add_attrs({}, node.attrs)

    if shape_type in _SEARCH_DATA:
        for element in _local_elements(node):
            if element.tag in _DATA_TAGS:
                _add_attrs(data, element.attrs)

    elif shape_type == ShapeType.FRAME:
        background = next((e for e in _local_elements(node) if e.tag == "rect"), None)
        if background is not None:
            _add_attrs(data, background.attrs)

    elif shape_type == ShapeType.SVG_RAW:
        descriptor = shape_descriptor(node, ns("svg-content"))
        tag = descriptor.attrs.get(ns("tag")) if descriptor is not None else None
        element = raw_element(node, tag)
        if element is not None:
            data = _add_attrs(_add_attrs({}, element.attrs), node.attrs)

    return _with_style_fallback(data)


# ── Common metadata ───────────────────────────────────────────────────────


def add_common_data(props: ShapeProps, node: Node) -> ShapeProps:
    return props.model_copy(
        update={
            "name": safe_meta(node, "name"),
            "blocked": safe_meta(node, "blocked", str_to_bool),
            "hidden": safe_meta(node, "hidden", str_to_bool),
            "transform": safe_meta(node, "transform", geom.parse_matrix),
            "transform_inverse": safe_meta(node, "transform-inverse", geom.parse_matrix),
            "flip_x": safe_meta(node, "flip-x", str_to_bool),
            "flip_y": safe_meta(node, "flip-y", str_to_bool),
            "proportion": safe_meta(node, "proportion", to_float),
            "proportion_lock": safe_meta(node, "proportion-lock", str_to_bool),
            "rotation": safe_meta(node, "rotation", to_float),
            "constraints_h": safe_meta(node, "constraints-h"),
            "constraints_v": safe_meta(node, "constraints-v"),
            "fixed_scroll": safe_meta(node, "fixed-scroll", str_to_bool),
        }
    )


# ── Geometry ──────────────────────────────────────────────────────────────


def _parse_position(svg_data: Mapping[str, Any]) -> dict[str, float | None]:
    return {key: parse_float(svg_data.get(key)) for key in ("x", "y", "width", "height")}


def _parse_circle(svg_data: Mapping[str, Any]) -> dict[str, float | None]:
    cx = parse_float(svg_data.get("cx"))
    cy = parse_float(svg_data.get("cy"))
    r = parse_float(svg_data.get("r"))
    rx = parse_float(svg_data.get("rx"))
    ry = parse_float(svg_data.get("ry"))
    rx = r if rx is None else rx
    ry = r if ry is None else ry

    if None in (cx, cy, rx, ry):
        return {"x": None, "y": None, "width": None, "height": None}
    return {"x": cx - rx, "y": cy - ry, "width": rx * 2, "height": ry * 2}


def _svg_raw_position(node: Node) -> dict[str, float | None]:
    """Explicit ``penpot:x/y/width/height`` overrides; absent keys stay unset."""
    descriptor = shape_descriptor(node, ns("svg-content"))
    if descriptor is None:
        return {}
    return {
        key: safe_meta(descriptor, key, to_float)
        for key in ("x", "y", "width", "height")
        if ns(key) in descriptor.attrs
    }


def _with_selrect(props: ShapeProps, values: Mapping[str, float | None]) -> ShapeProps:
    rect = geom.make_rect(*(values.get(k) or 0.0 for k in ("x", "y", "width", "height")))
    points = geom.transform_points(geom.rect_to_points(rect), geom.rect_center(rect), props.transform)
    return props.model_copy(update={**values, "selrect": rect, "points": points})


def _parse_path(props: ShapeProps, node: Node, svg_data: Mapping[str, Any]) -> ShapeProps:
    try:
        content = geom.parse_path_content(svg_data.get("d"))
    except (ValueError, IndexError) as e:
        logger.warning("Unreadable path data %r: %s", svg_data.get("d"), e)
        content = geom.parse_path_content(None)

    transform = props.transform if props.transform is not None else geom.identity()
    inverse = props.transform_inverse if props.transform_inverse is not None else geom.identity()

    center_x = safe_meta(node, "center-x", to_float)
    center_y = safe_meta(node, "center-y", to_float)
    if center_x is None or center_y is None:
        center = geom.rect_center(geom.content_selrect(content))
    else:
        center = Point(x=center_x, y=center_y)

    content = geom.transform_content(content, geom.transform_in(center, inverse))
    selrect = geom.content_selrect(content)
    points = geom.transform_points(geom.rect_to_points(selrect), center, transform)

    return props.model_copy(update={"content": content, "selrect": selrect, "points": points})


def add_position(
    props: ShapeProps, shape_type: ShapeType, node: Node, svg_data: Mapping[str, Any]
) -> ShapeProps:
    if shape_type in _HAS_POSITION:
        values = _parse_position(svg_data)
    elif shape_type == ShapeType.CIRCLE:
        values = _parse_circle(svg_data)
    elif shape_type == ShapeType.SVG_RAW:
        values = _svg_raw_position(node)
    elif shape_type == ShapeType.PATH:
        return _parse_path(props, node, svg_data)
    else:
        return props

    if not values:
        return props
    return _with_selrect(props, values)


# ── Fill, stroke, layer ───────────────────────────────────────────────────


def add_fill(props: ShapeProps, node: Node, svg_data: Mapping[str, Any]) -> ShapeProps:
    fill = svg_data.get("fill")
    props = props.model_copy(update={"fill_color": None, "fill_opacity": None})

    gradient = resolve_gradient(node, fill)
    if gradient is not None:
        return props.model_copy(update={"fill_color_gradient": gradient})

    if is_color(fill):
        return props.model_copy(
            update={
                "fill_color": fill,
                "fill_opacity": parse_float(svg_data.get("fill-opacity", "1")),
            }
        )
    return props


def add_stroke(props: ShapeProps, node: Node, svg_data: Mapping[str, Any]) -> ShapeProps:
    alignment = safe_meta(node, "stroke-alignment")
    stroke = svg_data.get("stroke")
    update: dict[str, Any] = {
        "stroke_alignment": alignment,
        "stroke_style": safe_meta(node, "stroke-style"),
        "stroke_color": stroke if is_color(stroke) else None,
        "stroke_opacity": parse_float(svg_data.get("stroke-opacity")),
        "stroke_width": parse_float(svg_data.get("stroke-width")),
    }

    gradient = resolve_gradient(node, stroke)
    if gradient is not None:
        update.update(stroke_color_gradient=gradient, stroke_color=None, stroke_opacity=None)

    # inner strokes are measured at half width by the renderer
    if alignment == "inner" and update["stroke_width"] is not None:
        update["stroke_width"] = update["stroke_width"] / 2

    return props.model_copy(update=update)


def add_layer_options(props: ShapeProps, svg_data: Mapping[str, Any]) -> ShapeProps:
    update: dict[str, Any] = {}

    blend_mode = svg_data.get("mix-blend-mode")
    if blend_mode is not None:
        try:
            update["blend_mode"] = BlendMode(blend_mode)
        except ValueError:
            logger.warning("Unknown blend mode %r", blend_mode)

    opacity = parse_float(svg_data.get("opacity"))
    if opacity is not None:
        update["opacity"] = opacity

    return props.model_copy(update=update) if update else props


# ── Effects and exports ───────────────────────────────────────────────────


def _descriptor_items(node: Node, tag: str) -> list[Node]:
    descriptor = shape_descriptor(node)
    if descriptor is None:
        return []
    return [n for n in flatten(descriptor) if isinstance(n, Node) and n.tag == tag]


def parse_shadow(node: Node, id_factory: IdFactory) -> Shadow:
    return Shadow(
        id=id_factory(),
        style=safe_meta(node, "shadow-type"),
        hidden=safe_meta(node, "hidden", str_to_bool),
        color=ShadowColor(
            color=safe_meta(node, "color"),
            opacity=safe_meta(node, "opacity", to_float),
        ),
        offset_x=safe_meta(node, "offset-x", to_float),
        offset_y=safe_meta(node, "offset-y", to_float),
        blur=safe_meta(node, "blur", to_float),
        spread=safe_meta(node, "spread", to_float),
    )


def parse_blur(node: Node, id_factory: IdFactory) -> Blur:
    return Blur(
        id=id_factory(),
        type=safe_meta(node, "blur-type"),
        hidden=safe_meta(node, "hidden", str_to_bool),
        value=safe_meta(node, "value", to_float),
    )


def parse_export(node: Node) -> Export:
    return Export(
        type=safe_meta(node, "type"),
        suffix=safe_meta(node, "suffix"),
        scale=safe_meta(node, "scale", to_float),
    )


def add_shadows(props: ShapeProps, node: Node, id_factory: IdFactory) -> ShapeProps:
    shadows = [parse_shadow(n, id_factory) for n in _descriptor_items(node, ns("shadow"))]
    return props.model_copy(update={"shadow": shadows}) if shadows else props


def add_blur(props: ShapeProps, node: Node, id_factory: IdFactory) -> ShapeProps:
    blurs = _descriptor_items(node, ns("blur"))
    if not blurs:
        return props
    return props.model_copy(update={"blur": parse_blur(blurs[0], id_factory)})


def add_exports(props: ShapeProps, node: Node) -> ShapeProps:
    exports = [parse_export(n) for n in _descriptor_items(node, ns("export"))]
    return props.model_copy(update={"exports": exports}) if exports else props


# ── Imported SVG passthrough ──────────────────────────────────────────────


def strip_uuid_prefix(value: Any) -> Any:
    """Drop ``<uuid>-`` prefixes the editor adds to ids of imported SVG elements."""
    if isinstance(value, str):
        return _UUID_PREFIX_RE.sub("", value)
    if isinstance(value, Mapping):
        return {k: strip_uuid_prefix(v) for k, v in value.items()}
    return value


def add_svg_attrs(props: ShapeProps, node: Node, svg_data: Mapping[str, Any]) -> ShapeProps:
    svg_import = shape_descriptor(node, ns("svg-import"))
    if svg_import is None:
        return props

    keys = [k.strip() for k in (svg_import.attrs.get(ns("svg-attrs")) or "").split(",")]
    update: dict[str, Any] = {
        "svg_attrs": {k: strip_uuid_prefix(svg_data[k]) for k in keys if k and k in svg_data}
    }

    if ns("svg-viewbox-x") in svg_import.attrs:
        update["svg_viewbox"] = SvgViewbox(
            x=safe_meta(svg_import, "svg-viewbox-x", to_float),
            y=safe_meta(svg_import, "svg-viewbox-y", to_float),
            width=safe_meta(svg_import, "svg-viewbox-width", to_float),
            height=safe_meta(svg_import, "svg-viewbox-height", to_float),
        )

    svg_transform = safe_meta(svg_import, "svg-transform", geom.parse_matrix)
    if svg_transform is not None:
        update["svg_transform"] = svg_transform

    svg_defs: dict[str, Node] = {}
    for definition in svg_import.elements:
        def_id = definition.attrs.get("def-id")
        if definition.tag == ns("svg-def") and def_id and definition.elements:
            svg_defs[def_id] = definition.elements[0]
    if svg_defs:
        update["svg_defs"] = svg_defs

    return props.model_copy(update=update)


# ── Kind specific ─────────────────────────────────────────────────────────


def add_rect_data(props: ShapeProps, node: Node, svg_data: Mapping[str, Any]) -> ShapeProps:
    r1 = safe_meta(node, "r1", to_float)
    if r1 is not None:
        # individual corner radii win over rx/ry even when those are present
        return props.model_copy(
            update={
                "r1": r1,
                "r2": safe_meta(node, "r2", to_float),
                "r3": safe_meta(node, "r3", to_float),
                "r4": safe_meta(node, "r4", to_float),
                "rx": None,
                "ry": None,
            }
        )

    rx = parse_float(svg_data.get("rx"))
    if rx is not None:
        return props.model_copy(update={"rx": rx, "ry": parse_float(svg_data.get("ry"))})
    return props


def add_image_data(props: ShapeProps, node: Node) -> ShapeProps:
    metadata = ImageMetadata(
        id=safe_meta(node, "media-id"),
        width=safe_meta(node, "media-width", to_float),
        height=safe_meta(node, "media-height", to_float),
        mtype=safe_meta(node, "media-mtype"),
    )
    return props.model_copy(update={"metadata": metadata, "fill_color_ref_id": metadata.id})


def add_text_data(props: ShapeProps, node: Node) -> ShapeProps:
    return props.model_copy(
        update={
            "grow_type": safe_meta(node, "grow-type"),
            "content": safe_meta(node, "content", decode_json),
        }
    )


def add_group_data(props: ShapeProps, node: Node) -> ShapeProps:
    if safe_meta(node, "masked-group", str_to_bool):
        return props.model_copy(update={"masked_group": True})
    return props


def add_svg_content(props: ShapeProps, node: Node) -> ShapeProps:
    content = svg_content(node)
    if content is None:
        logger.warning("svg-raw shape %r has no content descriptor", props.name)
        return props
    return props.model_copy(update={"content": content})


def add_kind_data(
    props: ShapeProps, shape_type: ShapeType, node: Node, svg_data: Mapping[str, Any]
) -> ShapeProps:
    if shape_type == ShapeType.SVG_RAW:
        return add_svg_content(props, node)
    if shape_type == ShapeType.GROUP:
        return add_group_data(props, node)
    if shape_type == ShapeType.RECT:
        return add_rect_data(props, node, svg_data)
    if shape_type == ShapeType.IMAGE:
        return add_image_data(props, node)
    if shape_type == ShapeType.TEXT:
        return add_text_data(props, node)
    # frame, path, circle, bool: nothing extra
    return props


# ── Entry point ───────────────────────────────────────────────────────────


def parse_data(
    shape_type: ShapeType | str,
    node: Node,
    *,
    id_factory: IdFactory = uuid4,
) -> ShapeProps | None:
    """Build the property bag for ``node``. Close markers yield ``None``."""
    if is_close_marker(node):
        return None

    try:
        shape_type = ShapeType(shape_type)
    except ValueError:
        raise UnknownShapeType(str(shape_type)) from None

    svg_data = get_svg_data(shape_type, node)

    props = add_common_data(ShapeProps(), node)
    props = add_position(props, shape_type, node, svg_data)
    props = add_fill(props, node, svg_data)
    props = add_stroke(props, node, svg_data)
    props = add_layer_options(props, svg_data)
    props = add_shadows(props, node, id_factory)
    props = add_blur(props, node, id_factory)
    props = add_exports(props, node)
    props = add_svg_attrs(props, node, svg_data)
    props = add_kind_data(props, shape_type, node, svg_data)

    logger.debug("Parsed %s shape %r", shape_type.value, props.name)
    return props


def parse_bag(
    shape_type: ShapeType | str,
    node: Node,
    *,
    id_factory: IdFactory = uuid4,
) -> dict[str, Any] | None:
    """``parse_data`` as a plain dict holding only the keys stages set."""
    props = parse_data(shape_type, node, id_factory=id_factory)
    return None if props is None else props.to_bag()
