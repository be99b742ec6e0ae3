"""Tests for the tree model, traversal and metadata lookup."""

from __future__ import annotations

import pytest

from design_import.errors import AttributeParseError, UnknownShapeType
from design_import.models.shape import ShapeType
from design_import.reader import read_document
from design_import.tree import (
    Close,
    Node,
    children_of,
    flatten,
    is_branch,
    is_close_marker,
    is_shape,
    read_meta,
    shape_descriptor,
    shape_type,
    valid_document,
)
from tests.conftest import DOCUMENT_SVG, PLAIN_SVG, UNKNOWN_TYPE_SVG, el, shape


def test_is_branch():
    assert is_branch(el("g", {}, el("rect")))
    assert is_branch(Node(tag="g", content=()))
    assert not is_branch(el("rect"))
    assert not is_branch(Close(ShapeType.RECT))
    assert not is_branch("text")


def test_children_of_plain_node():
    child = el("rect")
    assert children_of(el("g", {}, child)) == [child]
    assert children_of(el("rect")) == []


def test_children_of_shape_appends_close():
    node = shape("rect", {}, el("rect"))
    children = children_of(node)
    assert children[-1] == Close(ShapeType.RECT)
    assert len(children) == 3


def test_flatten_is_preorder():
    inner = shape("path", {}, el("path"))
    root = el("svg", {}, el("defs"), inner)
    tags = [
        item.tag if isinstance(item, Node) else item.type.value
        for item in flatten(root)
    ]
    assert tags == ["svg", "defs", "g", "penpot:shape", "path", "path"]


def test_flatten_close_markers_match_shapes():
    root = read_document(DOCUMENT_SVG)
    items = list(flatten(root))
    opened = [i for i in items if isinstance(i, Node) and is_shape(i)]
    closed = [i for i in items if is_close_marker(i)]
    assert len(opened) == 6
    assert len(closed) == len(opened)


def test_flatten_close_markers_nest():
    root = read_document(DOCUMENT_SVG)
    stack: list[ShapeType] = []
    for item in flatten(root):
        if is_close_marker(item):
            assert stack, "close marker without an open shape"
            assert stack.pop() == item.type
        elif is_shape(item):
            stack.append(shape_type(item))
    assert stack == []


def test_flatten_is_restartable():
    root = read_document(DOCUMENT_SVG)
    assert list(flatten(root)) == list(flatten(root))


def test_flatten_unknown_type_does_not_raise():
    root = read_document(UNKNOWN_TYPE_SVG)
    markers = [i for i in flatten(root) if is_close_marker(i)]
    assert Close(None) in markers
    assert len(markers) == 3


def test_shape_type_of_close_marker():
    assert shape_type(Close(ShapeType.TEXT)) == ShapeType.TEXT
    with pytest.raises(UnknownShapeType):
        shape_type(Close(None))


def test_shape_type_from_descriptor():
    assert shape_type(shape("svg-raw")) == ShapeType.SVG_RAW
    with pytest.raises(UnknownShapeType) as exc:
        shape_type(shape("widget"))
    assert exc.value.declared == "widget"


def test_is_shape():
    assert is_shape(shape("rect"))
    assert is_shape(Close(ShapeType.RECT))
    assert not is_shape(el("g", {}, el("rect")))
    assert not is_shape(el("rect"))


def test_shape_descriptor_with_tag():
    content = el("penpot:svg-content", {"penpot:tag": "svg"})
    node = el("g", {}, el("penpot:shape", {"penpot:type": "svg-raw"}, content))
    assert shape_descriptor(node).tag == "penpot:shape"
    assert shape_descriptor(node, "penpot:svg-content") is content
    assert shape_descriptor(node, "penpot:svg-import") is None
    assert shape_descriptor(el("rect")) is None


def test_read_meta_prefers_node_attrs():
    node = shape("rect", {"name": "from descriptor"}, attrs={"penpot:name": "own"})
    assert read_meta(node, "name") == "own"


def test_read_meta_falls_back_to_descriptor():
    node = shape("rect", {"rotation": "45"})
    assert read_meta(node, "rotation") == "45"
    assert read_meta(node, "rotation", float) == 45.0
    assert read_meta(node, "missing") is None


def test_read_meta_decode_error_names_attribute():
    node = shape("rect", {"rotation": "sideways"})
    with pytest.raises(AttributeParseError) as exc:
        read_meta(node, "rotation", float)
    assert exc.value.attribute == "penpot:rotation"
    assert exc.value.value == "sideways"


def test_valid_document():
    assert valid_document(read_document(DOCUMENT_SVG))
    assert not valid_document(read_document(PLAIN_SVG))


def test_node_is_immutable():
    node = el("rect", {"x": "1"})
    with pytest.raises(TypeError):
        node.attrs["x"] = "2"
