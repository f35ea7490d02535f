"""Short link endpoints."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import RedirectResponse

from camdn.api.deps import get_app_settings, get_link_service
from camdn.core.config import Settings
from camdn.core.security import require_api_key
from camdn.modules.links import ShortLinkService
from camdn.schemas import ErrorResponse, ShortenRequest, ShortenResponse

router = APIRouter(tags=["links"])


@router.put(
    "/shorten",
    response_model=ShortenResponse,
    summary="Create a short link",
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def shorten_url(
    payload: Optional[ShortenRequest] = Body(default=None),
    _: None = Depends(require_api_key),
    service: ShortLinkService = Depends(get_link_service),
    settings: Settings = Depends(get_app_settings),
) -> ShortenResponse:
    link = await service.shorten(payload.url if payload else None)
    return ShortenResponse(url=f"{settings.public_base_url}/l/{link.short_id}")


@router.get(
    "/l/{short_id}",
    summary="Follow a short link",
    response_class=RedirectResponse,
    status_code=302,
    responses={404: {"model": ErrorResponse}},
)
async def follow_short_link(short_id: str, service: ShortLinkService = Depends(get_link_service)):
    link = await service.resolve(short_id)
    return RedirectResponse(link.url, status_code=302)
