"""Inline CSS declaration lists (``style="fill: red; opacity: .5"``)."""

from __future__ import annotations

from typing import Any


def parse_style(style: Any) -> Any:
    """Turn a declaration list into a dict. First occurrence of a property wins.

    Values that are not strings are returned untouched, so already-expanded
    style mappings can be fed through again.
    """
    if not isinstance(style, str):
        return style

    result: dict[str, str] = {}
    for declaration in style.split(";"):
        declaration = declaration.strip()
        if not declaration:
            continue
        name, _, value = declaration.partition(":")
        name = name.strip()
        if name and name not in result:
            result[name] = value.strip()
    return result
