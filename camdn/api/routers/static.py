"""Bundled assets referenced by the viewer page."""
from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import FileResponse

from camdn.core.container import STATIC_DIR

router = APIRouter(tags=["static"])


@router.get("/styles.css", include_in_schema=False)
async def stylesheet() -> FileResponse:
    return FileResponse(STATIC_DIR / "styles.css", media_type="text/css")


@router.get("/music.jpg", include_in_schema=False)
async def audio_icon() -> FileResponse:
    return FileResponse(STATIC_DIR / "music.jpg", media_type="image/jpeg")
