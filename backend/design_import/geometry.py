"""Matrix, rectangle and path-content helpers. No parser imports.

Matrices are 3x3 numpy arrays in SVG convention::

    | a c e |
    | b d f |
    | 0 0 1 |
"""

from __future__ import annotations

import warnings

import numpy as np
from numpy.typing import NDArray
from svgpathtools import Path, parse_path
from svgpathtools.parser import SVGSyntaxWarning, parse_transform
from svgpathtools.path import transform as transform_segments

from design_import.models.shape import Point, Rect

Matrix = NDArray[np.float64]


def identity() -> Matrix:
    return np.identity(3)


def translate(x: float, y: float) -> Matrix:
    m = np.identity(3)
    m[0, 2] = x
    m[1, 2] = y
    return m


def parse_matrix(text: str) -> Matrix:
    """Parse an SVG transform list, e.g. ``matrix(1, 0, 0, 1, 10, 20)``."""
    if not isinstance(text, str) or not text.strip():
        raise ValueError("empty transform")
    if ")" not in text:
        raise ValueError(f"not a transform list: {text!r}")
    # svgpathtools warns and skips unparseable parts instead of raising.
    with warnings.catch_warnings():
        warnings.simplefilter("error", SVGSyntaxWarning)
        try:
            return np.asarray(parse_transform(text), dtype=np.float64)
        except SVGSyntaxWarning as e:
            raise ValueError(f"malformed transform {text!r}: {e}") from e
        except IndexError as e:
            raise ValueError(f"incomplete transform: {text!r}") from e


def matrix_values(m: Matrix) -> dict[str, float]:
    """The six significant coefficients, keyed a–f."""
    return {
        "a": float(m[0, 0]),
        "b": float(m[1, 0]),
        "c": float(m[0, 1]),
        "d": float(m[1, 1]),
        "e": float(m[0, 2]),
        "f": float(m[1, 2]),
    }


def transform_in(center: Point, m: Matrix) -> Matrix:
    """``m`` applied about ``center`` instead of the origin."""
    return translate(center.x, center.y) @ m @ translate(-center.x, -center.y)


def make_rect(x: float, y: float, width: float, height: float) -> Rect:
    return Rect(
        x=x,
        y=y,
        width=width,
        height=height,
        x1=x,
        y1=y,
        x2=x + width,
        y2=y + height,
    )


def rect_center(rect: Rect) -> Point:
    return Point(x=rect.x + rect.width / 2, y=rect.y + rect.height / 2)


def rect_to_points(rect: Rect) -> list[Point]:
    """Corners clockwise from top-left."""
    return [
        Point(x=rect.x1, y=rect.y1),
        Point(x=rect.x2, y=rect.y1),
        Point(x=rect.x2, y=rect.y2),
        Point(x=rect.x1, y=rect.y2),
    ]


def transform_points(points: list[Point], center: Point, m: Matrix | None) -> list[Point]:
    if m is None:
        return list(points)
    full = transform_in(center, m)
    coords = np.array([[p.x, p.y, 1.0] for p in points]).T
    out = full @ coords
    return [Point(x=float(x), y=float(y)) for x, y in zip(out[0], out[1])]


def parse_path_content(d: str | None) -> Path:
    """Path-data grammar. An absent or empty ``d`` is an empty path."""
    if not d or not d.strip():
        return Path()
    return parse_path(d)


def transform_content(content: Path, m: Matrix) -> Path:
    if len(content) == 0:
        return content
    return transform_segments(content, m)


def content_selrect(content: Path) -> Rect:
    """Bounding box of the path's segments (curves included, not just nodes)."""
    if len(content) == 0:
        return make_rect(0.0, 0.0, 0.0, 0.0)
    xmin, xmax, ymin, ymax = content.bbox()
    return make_rect(float(xmin), float(ymin), float(xmax - xmin), float(ymax - ymin))
