"""Tests for position, selrect and points per shape kind."""

from __future__ import annotations

import numpy as np
import pytest

from design_import.geometry import make_rect, parse_matrix, rect_to_points, transform_in
from design_import.models.shape import Point, ShapeType
from design_import.parser import parse_bag, parse_data
from tests.conftest import el, shape


def _corners(props):
    return [(p.x, p.y) for p in props.points]


def _flat(props):
    return [c for p in props.points for c in (p.x, p.y)]


def test_rect_selrect_and_points():
    node = shape("rect", {}, el("rect", {"x": "10", "y": "20", "width": "30", "height": "40"}))
    props = parse_data(ShapeType.RECT, node)

    assert (props.x, props.y, props.width, props.height) == (10, 20, 30, 40)
    sr = props.selrect
    assert (sr.x, sr.y, sr.width, sr.height) == (10, 20, 30, 40)
    assert _corners(props) == [(10, 20), (40, 20), (40, 60), (10, 60)]


def test_rect_points_follow_transform():
    node = shape(
        "rect",
        {"transform": "matrix(0, 1, -1, 0, 0, 0)"},
        el("rect", {"x": "0", "y": "0", "width": "20", "height": "10"}),
    )
    props = parse_data(ShapeType.RECT, node)

    # rotated 90° about (10, 5)
    assert props.selrect.width == 20
    assert _corners(props)[0] == pytest.approx((15, -5))
    assert _corners(props)[2] == pytest.approx((5, 15))


def test_circle_bounding_box():
    node = shape("circle", {}, el("ellipse", {"cx": "50", "cy": "50", "rx": "10", "ry": "5"}))
    props = parse_data(ShapeType.CIRCLE, node)
    assert (props.x, props.y, props.width, props.height) == (40, 45, 20, 10)
    assert props.selrect.x2 == 60


def test_circle_with_single_radius():
    node = shape("circle", {}, el("circle", {"cx": "5", "cy": "5", "r": "5"}))
    # <circle> is not a data element, the radius comes from the wrapper
    props = parse_data(ShapeType.CIRCLE, node)
    assert props.x is None

    node = shape("circle", {}, el("ellipse", {"cx": "5", "cy": "5", "r": "5"}))
    props = parse_data(ShapeType.CIRCLE, node)
    assert (props.x, props.y, props.width, props.height) == (0, 0, 10, 10)


def test_path_selrect_without_transform():
    node = shape("path", {}, el("path", {"d": "M0 0 L10 0 L10 10 Z"}))
    props = parse_data(ShapeType.PATH, node)

    assert len(props.content) == 3
    sr = props.selrect
    assert (sr.x, sr.y, sr.width, sr.height) == pytest.approx((0, 0, 10, 10))
    assert _flat(props) == pytest.approx([0, 0, 10, 0, 10, 10, 0, 10])


def test_path_content_moves_to_local_space():
    node = shape(
        "path",
        {
            "transform": "matrix(2, 0, 0, 2, 0, 0)",
            "transform-inverse": "matrix(0.5, 0, 0, 0.5, 0, 0)",
            "center-x": "5",
            "center-y": "5",
        },
        el("path", {"d": "M0 0 L10 0 L10 10 L0 10 Z"}),
    )
    props = parse_data(ShapeType.PATH, node)

    sr = props.selrect
    assert (sr.x, sr.y, sr.width, sr.height) == pytest.approx((2.5, 2.5, 5, 5))
    assert _flat(props) == pytest.approx([0, 0, 10, 0, 10, 10, 0, 10])


def test_path_without_data_is_empty():
    props = parse_data(ShapeType.PATH, shape("path"))
    assert len(props.content) == 0
    assert props.selrect.width == 0


def test_svg_raw_position_overrides():
    descriptor = el(
        "penpot:shape",
        {"penpot:type": "svg-raw"},
        el("penpot:svg-content", {"penpot:tag": "g", "penpot:x": "3"}),
    )
    node = el("g", {}, descriptor, el("g", {"x": "100"}))
    bag = parse_bag(ShapeType.SVG_RAW, node)

    assert bag["x"] == 3
    assert "y" not in bag
    assert "width" not in bag
    assert bag["selrect"].x == 3


def test_svg_raw_without_overrides_has_no_selrect():
    descriptor = el("penpot:shape", {"penpot:type": "svg-raw"}, el("penpot:svg-content", {"penpot:tag": "g"}))
    bag = parse_bag(ShapeType.SVG_RAW, el("g", {}, descriptor, el("g")))
    assert "selrect" not in bag
    assert "x" not in bag


def test_missing_numbers_are_absent():
    node = shape("rect", {}, el("rect", {"x": "1", "y": "oops", "width": "5px"}))
    props = parse_data(ShapeType.RECT, node)
    assert props.x == 1
    assert props.y is None
    assert props.width == 5
    assert props.height is None
    assert props.selrect.height == 0


def test_group_has_no_geometry():
    bag = parse_bag(ShapeType.GROUP, shape("group", {}, shape("rect")))
    assert "selrect" not in bag
    assert "x" not in bag


def test_transform_in_keeps_center_fixed():
    center = Point(x=10, y=5)
    m = transform_in(center, parse_matrix("matrix(0, 1, -1, 0, 0, 0)"))
    assert list(m @ np.array([10, 5, 1])) == pytest.approx([10, 5, 1])


def test_rect_to_points_order():
    points = rect_to_points(make_rect(0, 0, 2, 1))
    assert [(p.x, p.y) for p in points] == [(0, 0), (2, 0), (2, 1), (0, 1)]


def test_parse_matrix_rejects_garbage():
    with pytest.raises(ValueError):
        parse_matrix("matrix(a, b)")
    with pytest.raises(ValueError):
        parse_matrix("rotate(abc)")
    with pytest.raises(ValueError):
        parse_matrix("matrix(1 0 0 1)")
    with pytest.raises(ValueError):
        parse_matrix("")
