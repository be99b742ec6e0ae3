"""Attribute value coercions shared by the composer stages."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")
_UNIT_RE = re.compile(r"px$", re.IGNORECASE)


def to_float(text: str) -> float:
    """Strict float decoding. Accepts a trailing ``px``; raises ``ValueError``."""
    if isinstance(text, (int, float)):
        return float(text)
    return float(_UNIT_RE.sub("", text.strip()))


def parse_float(value: Any) -> float | None:
    """Lenient float decoding for raw SVG attributes: malformed text is absent."""
    if value is None:
        return None
    try:
        return to_float(value)
    except (ValueError, TypeError, AttributeError):
        logger.debug("Not a number: %r", value)
        return None


def str_to_bool(text: str) -> bool:
    return text == "true"


def is_color(value: Any) -> bool:
    return isinstance(value, str) and bool(_HEX_COLOR_RE.match(value))


def decode_json(text: str) -> Any:
    """JSON payload decoding; ``json.JSONDecodeError`` is a ``ValueError``."""
    return json.loads(text)
