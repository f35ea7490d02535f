"""Exception handlers mapping domain errors onto ``{"error": ...}`` bodies."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from camdn.modules.assets import AssetNotFoundError, StorageError, UploadTooLargeError, UploadValidationError
from camdn.modules.links import LinkError, LinkNotFoundError, LinkValidationError

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def asset_not_found_handler(request: Request, exc: AssetNotFoundError) -> JSONResponse:
    logger.info("Asset not found for %s", request.url.path)
    return _error(status.HTTP_404_NOT_FOUND, "File not found")


async def upload_validation_handler(request: Request, exc: UploadValidationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, str(exc) or "Invalid upload")


async def upload_too_large_handler(request: Request, exc: UploadTooLargeError) -> JSONResponse:
    return _error(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "File too large")


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Upload storage failure: %s", exc.__cause__ or exc, exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error uploading file")


async def link_not_found_handler(request: Request, exc: LinkNotFoundError) -> JSONResponse:
    return _error(status.HTTP_404_NOT_FOUND, "URL not found")


async def link_validation_handler(request: Request, exc: LinkValidationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, str(exc) or "No URL provided")


async def link_error_handler(request: Request, exc: LinkError) -> JSONResponse:
    logger.error("Short link failure: %s", exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Could not shorten URL")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(AssetNotFoundError, asset_not_found_handler)
    app.add_exception_handler(UploadValidationError, upload_validation_handler)
    app.add_exception_handler(UploadTooLargeError, upload_too_large_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(LinkNotFoundError, link_not_found_handler)
    app.add_exception_handler(LinkValidationError, link_validation_handler)
    app.add_exception_handler(LinkError, link_error_handler)
