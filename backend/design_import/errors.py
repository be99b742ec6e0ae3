"""Import error taxonomy.

Nothing raised here is fatal to a whole import: the walker and the composer
stages decide locally whether to drop a field or skip a shape.
"""

from __future__ import annotations


class ImportParseError(Exception):
    """Base class for everything the import parser raises."""


class UnknownShapeType(ImportParseError):
    """A shape descriptor declares a type the parser has no stages for."""

    def __init__(self, declared: str | None) -> None:
        super().__init__(f"Unknown shape type: {declared!r}")
        self.declared = declared


class AttributeParseError(ImportParseError):
    """A metadata attribute is present but its text cannot be decoded."""

    def __init__(self, attribute: str, value: object, reason: str = "") -> None:
        message = f"Cannot decode {attribute}={value!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.attribute = attribute
        self.value = value


class InvalidDocument(ImportParseError):
    """The serialized document is not well-formed XML or not a design export."""
