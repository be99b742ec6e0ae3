"""Typed shape model produced by the import parser.

``ShapeProps`` is the intermediate builder threaded through the composer
stages. It is frozen; every stage returns ``props.model_copy(update=...)`` so a
stage can never mutate what an earlier one produced. Fields a stage never
touched stay *unset* and are left out of ``to_bag()``.
"""

from __future__ import annotations

import enum
from typing import Any
from uuid import UUID

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


class ShapeType(str, enum.Enum):
    FRAME = "frame"
    RECT = "rect"
    IMAGE = "image"
    PATH = "path"
    TEXT = "text"
    CIRCLE = "circle"
    GROUP = "group"
    SVG_RAW = "svg-raw"
    BOOL = "bool"


class BlendMode(str, enum.Enum):
    NORMAL = "normal"
    MULTIPLY = "multiply"
    SCREEN = "screen"
    OVERLAY = "overlay"
    DARKEN = "darken"
    LIGHTEN = "lighten"
    COLOR_DODGE = "color-dodge"
    COLOR_BURN = "color-burn"
    HARD_LIGHT = "hard-light"
    SOFT_LIGHT = "soft-light"
    DIFFERENCE = "difference"
    EXCLUSION = "exclusion"
    HUE = "hue"
    SATURATION = "saturation"
    COLOR = "color"
    LUMINOSITY = "luminosity"


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class Rect(BaseModel):
    """Axis-aligned rectangle, with its corner coordinates precomputed."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float
    height: float
    x1: float
    y1: float
    x2: float
    y2: float


class GradientStop(BaseModel):
    color: str | None = None
    opacity: float | None = None
    offset: float | None = None


class Gradient(BaseModel):
    type: str  # linear | radial
    start_x: float | None = None
    start_y: float | None = None
    end_x: float | None = None
    end_y: float | None = None
    width: float | None = None
    stops: list[GradientStop] = Field(default_factory=list)


class ShadowColor(BaseModel):
    color: str | None = None
    opacity: float | None = None


class Shadow(BaseModel):
    id: UUID
    style: str | None = None  # drop-shadow | inner-shadow
    hidden: bool | None = None
    color: ShadowColor = Field(default_factory=ShadowColor)
    offset_x: float | None = None
    offset_y: float | None = None
    blur: float | None = None
    spread: float | None = None


class Blur(BaseModel):
    """Blur as exported: the export record fields, not a shadow-like record."""

    id: UUID
    type: str | None = None  # layer-blur
    hidden: bool | None = None
    value: float | None = None


class Export(BaseModel):
    type: str | None = None  # png | jpeg | svg | pdf
    suffix: str | None = None
    scale: float | None = None


class ImageMetadata(BaseModel):
    id: str | None = None
    width: float | None = None
    height: float | None = None
    mtype: str | None = None


class SvgViewbox(BaseModel):
    x: float | None = None
    y: float | None = None
    width: float | None = None
    height: float | None = None


class SvgRawContent(BaseModel):
    """Untouched foreign markup kept for re-embedding."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    tag: str | None = None
    attrs: dict[str, str] = Field(default_factory=dict)
    content: Any = None


class ShapeProps(BaseModel):
    """Property bag for one shape, filled in stage by stage."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    # Common metadata
    name: str | None = None
    blocked: bool | None = None
    hidden: bool | None = None
    transform: np.ndarray | None = None
    transform_inverse: np.ndarray | None = None
    flip_x: bool | None = None
    flip_y: bool | None = None
    proportion: float | None = None
    proportion_lock: bool | None = None
    rotation: float | None = None
    constraints_h: str | None = None
    constraints_v: str | None = None
    fixed_scroll: bool | None = None

    # Geometry
    x: float | None = None
    y: float | None = None
    width: float | None = None
    height: float | None = None
    selrect: Rect | None = None
    points: list[Point] | None = None

    # Fill / stroke
    fill_color: str | None = None
    fill_opacity: float | None = None
    fill_color_gradient: Gradient | None = None
    fill_color_ref_id: str | None = None
    stroke_alignment: str | None = None
    stroke_style: str | None = None
    stroke_color: str | None = None
    stroke_opacity: float | None = None
    stroke_width: float | None = None
    stroke_color_gradient: Gradient | None = None

    # Layer options and effects
    blend_mode: BlendMode | None = None
    opacity: float | None = None
    shadow: list[Shadow] | None = None
    blur: Blur | None = None
    exports: list[Export] | None = None

    # Imported-SVG passthrough
    svg_attrs: dict[str, Any] | None = None
    svg_viewbox: SvgViewbox | None = None
    svg_transform: np.ndarray | None = None
    svg_defs: dict[str, Any] | None = None

    # Kind specific
    r1: float | None = None
    r2: float | None = None
    r3: float | None = None
    r4: float | None = None
    rx: float | None = None
    ry: float | None = None
    metadata: ImageMetadata | None = None
    grow_type: str | None = None
    masked_group: bool | None = None
    # svgpathtools.Path for paths, decoded JSON for text, SvgRawContent for svg-raw
    content: Any = None

    def to_bag(self) -> dict[str, Any]:
        """Only the keys some stage actually set, nested models kept as models."""
        return {name: getattr(self, name) for name in self.model_fields_set}
