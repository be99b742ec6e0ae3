"""Import walker — builds the flat shape list of a whole document.

Walks ``flatten(root)``; every opening shape is parsed and attached to the
shape on top of the parent stack, every close marker pops it. Shapes whose
type is unknown are skipped together with their subtree.
"""

from __future__ import annotations

import logging
import time
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from design_import.errors import InvalidDocument, UnknownShapeType
from design_import.models.shape import ShapeProps, ShapeType
from design_import.parser import IdFactory, parse_data
from design_import.reader import read_document
from design_import.tree import Node, flatten, is_close_marker, is_shape, shape_type, valid_document

logger = logging.getLogger(__name__)


class ImportedShape(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: UUID
    parent_id: UUID | None = None
    type: ShapeType
    props: ShapeProps


class ImportResult(BaseModel):
    shapes: list[ImportedShape] = Field(default_factory=list)
    skipped: int = 0
    errors: list[str] = Field(default_factory=list)

    def children_of(self, shape_id: UUID | None) -> list[ImportedShape]:
        return [s for s in self.shapes if s.parent_id == shape_id]


def import_tree(root: Node, *, id_factory: IdFactory = uuid4) -> ImportResult:
    """Parse every shape under ``root`` (inclusive)."""
    start = time.perf_counter()
    result = ImportResult()
    # None entries mark the subtree of a skipped shape
    stack: list[UUID | None] = []

    for item in flatten(root):
        if is_close_marker(item):
            stack.pop()
            continue
        if not is_shape(item):
            continue

        if stack and stack[-1] is None:
            stack.append(None)
            continue

        try:
            kind = shape_type(item)
        except UnknownShapeType as e:
            logger.warning("Skipping shape: %s", e)
            result.skipped += 1
            result.errors.append(str(e))
            stack.append(None)
            continue

        props = parse_data(kind, item, id_factory=id_factory)
        shape = ImportedShape(
            id=id_factory(),
            parent_id=stack[-1] if stack else None,
            type=kind,
            props=props,
        )
        result.shapes.append(shape)
        stack.append(shape.id)

    elapsed = (time.perf_counter() - start) * 1000
    logger.info(
        "Import complete: %d shapes (%d skipped) in %.0fms",
        len(result.shapes),
        result.skipped,
        elapsed,
    )
    return result


def import_document(text: str | bytes, *, id_factory: IdFactory = uuid4) -> ImportResult:
    """Read a serialized export and import its shapes. Raises ``InvalidDocument``."""
    root = read_document(text)
    if not valid_document(root):
        raise InvalidDocument("Document has no penpot namespace declaration")
    return import_tree(root, id_factory=id_factory)


def summarize(result: ImportResult) -> dict[str, Any]:
    counts: dict[str, int] = {}
    for shape in result.shapes:
        counts[shape.type.value] = counts.get(shape.type.value, 0) + 1
    return {"shapes": len(result.shapes), "skipped": result.skipped, "by_type": counts}
