"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ImportRequest(BaseModel):
    svg: str = Field(..., description="Serialized design export (SVG with penpot metadata)")
