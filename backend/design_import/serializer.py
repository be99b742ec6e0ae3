"""JSON-ready rendering of parsed shapes for the HTTP layer."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any
from uuid import UUID

import numpy as np
from pydantic import BaseModel
from svgpathtools import Path

from design_import.geometry import matrix_values
from design_import.importer import ImportedShape
from design_import.models.shape import ShapeProps
from design_import.tree import Node


def to_jsonable(value: Any) -> Any:
    if isinstance(value, ShapeProps):
        return {k: to_jsonable(v) for k, v in value.to_bag().items()}
    if isinstance(value, BaseModel):
        return {k: to_jsonable(getattr(value, k)) for k in type(value).model_fields}
    if isinstance(value, np.ndarray):
        return matrix_values(value)
    if isinstance(value, Path):
        return value.d() if len(value) else ""
    if isinstance(value, Node):
        return {
            "tag": value.tag,
            "attrs": dict(value.attrs),
            "content": None if value.content is None else [to_jsonable(c) for c in value.content],
        }
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def shape_to_json(shape: ImportedShape) -> dict[str, Any]:
    return {
        "id": str(shape.id),
        "parent_id": str(shape.parent_id) if shape.parent_id else None,
        "type": shape.type.value,
        "props": to_jsonable(shape.props),
    }
