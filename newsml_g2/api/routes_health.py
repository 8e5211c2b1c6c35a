"""Health and readiness routes."""

import os

from fastapi import APIRouter, HTTPException, Request

router = APIRouter()


@router.get("/health")
def health() -> dict[str, str]:
    """Simple liveness probe."""
    return {"status": "ok"}


@router.get("/ready")
def ready(request: Request) -> dict[str, object]:
    """
    Readiness probe.

    The importer is ready when at least one dialect parser is registered and
    the output directory records are written to exists and is writable.
    """
    settings = request.app.state.settings
    dialects = [parser.name for parser in request.app.state.chooser.parsers]
    if not dialects:
        raise HTTPException(status_code=503, detail="No dialect parsers registered")
    out_dir = settings.import_output_dir
    if not settings.output_dir_exists:
        raise HTTPException(status_code=503, detail=f"Output directory missing: {out_dir}")
    if not os.access(out_dir, os.W_OK):
        raise HTTPException(status_code=503, detail=f"Output directory not writable: {out_dir}")
    return {"status": "ok", "dialects": dialects}
