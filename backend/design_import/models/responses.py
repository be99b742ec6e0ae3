"""API response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    shape_types: list[str] = Field(default_factory=list)


class ImportResponse(BaseModel):
    shapes: list[dict[str, Any]] = Field(default_factory=list)
    skipped: int = 0
    by_type: dict[str, int] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)
    processing_time_ms: float = 0.0
