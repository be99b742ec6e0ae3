"""Shared test fixtures."""

from __future__ import annotations

import itertools
import uuid

import pytest

from design_import.tree import Node


def el(tag: str, attrs: dict[str, str] | None = None, *children: Node | str) -> Node:
    """Build a node; no children means a leaf."""
    return Node(tag=tag, attrs=attrs or {}, content=children or None)


def shape(kind: str, meta: dict[str, str] | None = None, *children: Node, attrs=None) -> Node:
    """A ``<g>`` shape wrapper with a ``penpot:shape`` descriptor first."""
    descriptor_attrs = {"penpot:type": kind, **{f"penpot:{k}": v for k, v in (meta or {}).items()}}
    return el("g", attrs or {}, el("penpot:shape", descriptor_attrs), *children)


# Sample exports

DOCUMENT_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" xmlns:penpot="https://penpot.app/xmlns" viewBox="0 0 800 600">
  <g id="shape-frame">
    <penpot:shape penpot:type="frame" penpot:name="Board"/>
    <rect x="0" y="0" width="800" height="600" fill="#FFFFFF"/>
    <g id="shape-rect">
      <penpot:shape penpot:type="rect" penpot:name="Rectangle" penpot:r1="4" penpot:r2="4" penpot:r3="0" penpot:r4="0" penpot:stroke-alignment="inner" penpot:stroke-style="solid">
        <penpot:shadow penpot:shadow-type="drop-shadow" penpot:color="#000000" penpot:opacity="0.2" penpot:offset-x="4" penpot:offset-y="4" penpot:blur="4" penpot:spread="0" penpot:hidden="false"/>
        <penpot:blur penpot:blur-type="layer-blur" penpot:value="4" penpot:hidden="false"/>
        <penpot:export penpot:type="png" penpot:suffix="@2x" penpot:scale="2"/>
      </penpot:shape>
      <rect x="10" y="20" width="30" height="40" fill="#B1B2B5" stroke="#000000" stroke-width="4" stroke-opacity="1"/>
    </g>
    <g id="shape-circle">
      <penpot:shape penpot:type="circle" penpot:name="Ellipse"/>
      <ellipse cx="50" cy="50" rx="10" ry="5" style="fill: #FF0000; fill-opacity: 0.5"/>
    </g>
    <g id="shape-group">
      <penpot:shape penpot:type="group" penpot:name="Group" penpot:masked-group="true"/>
      <g id="shape-path">
        <penpot:shape penpot:type="path" penpot:name="Path"/>
        <defs>
          <linearGradient id="gradient-1" penpot:gradient="true" x1="0" y1="0" x2="1" y2="1">
            <stop offset="0" stop-color="#000000" stop-opacity="1"/>
            <stop offset="1" stop-color="#FFFFFF" stop-opacity="0.5"/>
          </linearGradient>
        </defs>
        <path d="M0 0 L10 0 L10 10 Z" fill="url(#gradient-1)"/>
      </g>
    </g>
    <g id="shape-raw">
      <penpot:shape penpot:type="svg-raw" penpot:name="Icon">
        <penpot:svg-content penpot:tag="svg" penpot:x="5" penpot:y="6" penpot:width="24" penpot:height="24" viewBox="0 0 24 24"/>
      </penpot:shape>
      <g>
        <svg viewBox="0 0 24 24" stroke-width="2" style="stroke-linecap: round">
          <circle cx="12" cy="12" r="10" class="outer" xlink:href="#a"/>
        </svg>
      </g>
    </g>
  </g>
</svg>'''

UNKNOWN_TYPE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" xmlns:penpot="https://penpot.app/xmlns">
  <g>
    <penpot:shape penpot:type="widget" penpot:name="Mystery"/>
    <g>
      <penpot:shape penpot:type="rect" penpot:name="Inside mystery"/>
      <rect x="0" y="0" width="1" height="1"/>
    </g>
  </g>
  <g>
    <penpot:shape penpot:type="rect" penpot:name="Survivor"/>
    <rect x="1" y="2" width="3" height="4"/>
  </g>
</svg>'''

PLAIN_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">
  <circle cx="12" cy="12" r="10"/>
</svg>'''


@pytest.fixture
def document_svg() -> str:
    return DOCUMENT_SVG


@pytest.fixture
def id_factory():
    """Deterministic ids: 00000000-0000-0000-0000-000000000001, ...002, ..."""
    counter = itertools.count(1)
    return lambda: uuid.UUID(int=next(counter))
