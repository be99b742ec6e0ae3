"""Design-document import parser."""

from design_import.errors import AttributeParseError, ImportParseError, InvalidDocument, UnknownShapeType
from design_import.importer import ImportResult, ImportedShape, import_document, import_tree
from design_import.models.shape import ShapeProps, ShapeType
from design_import.parser import parse_bag, parse_data
from design_import.reader import read_document
from design_import.style import parse_style
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

__all__ = [
    "AttributeParseError",
    "Close",
    "ImportParseError",
    "ImportResult",
    "ImportedShape",
    "InvalidDocument",
    "Node",
    "ShapeProps",
    "ShapeType",
    "UnknownShapeType",
    "children_of",
    "flatten",
    "import_document",
    "import_tree",
    "is_branch",
    "is_close_marker",
    "is_shape",
    "parse_bag",
    "parse_data",
    "parse_style",
    "read_document",
    "read_meta",
    "shape_descriptor",
    "shape_type",
    "valid_document",
]
