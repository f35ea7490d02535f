"""Authenticated upload endpoint."""
from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status

from camdn.api.deps import get_app_settings, get_pipeline
from camdn.api.multipart import MultipartFileStream, multipart_boundary
from camdn.core.config import Settings
from camdn.core.security import require_api_key
from camdn.modules.assets import UploadPipeline
from camdn.schemas import ErrorResponse, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["upload"])


@router.put(
    "/upload",
    response_model=UploadResponse,
    summary="Upload a file and get its public link",
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def upload_file(
    request: Request,
    background_tasks: BackgroundTasks,
    _: None = Depends(require_api_key),
    pipeline: UploadPipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_app_settings),
) -> UploadResponse:
    # The body is read only after the API key check passed.
    boundary = multipart_boundary(request.headers.get("content-type"))
    if boundary is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")

    source = MultipartFileStream(request.stream(), boundary, settings.file_size_limit_bytes)
    filename = await source.open()
    if filename is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")

    stored = await pipeline.store(filename, source)
    if stored.needs_thumbnail:
        background_tasks.add_task(pipeline.derive_thumbnail, stored.asset)
    return UploadResponse(fileName=stored.locator)
