"""POST /api/import — parse a design export into shapes."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, HTTPException

from design_import.config import Settings
from design_import.dependencies import get_settings
from design_import.errors import InvalidDocument
from design_import.importer import import_document, summarize
from design_import.models.requests import ImportRequest
from design_import.models.responses import ImportResponse
from design_import.serializer import shape_to_json

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/import", response_model=ImportResponse)
def import_svg(req: ImportRequest, settings: Settings = Depends(get_settings)) -> ImportResponse:
    start = time.perf_counter()

    if len(req.svg.encode("utf-8")) > settings.max_document_bytes:
        raise HTTPException(status_code=413, detail="Document too large")

    try:
        result = import_document(req.svg)
    except InvalidDocument as e:
        logger.info("Rejected import: %s", e)
        raise HTTPException(status_code=422, detail=str(e)) from e

    elapsed = (time.perf_counter() - start) * 1000
    return ImportResponse(
        shapes=[shape_to_json(s) for s in result.shapes],
        skipped=result.skipped,
        by_type=summarize(result)["by_type"],
        errors=result.errors,
        processing_time_ms=round(elapsed, 1),
    )
