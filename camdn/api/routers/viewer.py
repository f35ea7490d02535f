"""Public viewer pages."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header
from fastapi.responses import HTMLResponse, RedirectResponse

from camdn.api.deps import get_renderer
from camdn.modules.assets import Redirect, RenderDispatcher
from camdn.schemas import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["viewer"])


@router.get(
    "/s/{date}/{filename}",
    response_class=HTMLResponse,
    summary="Viewer page with link-preview tags",
    responses={302: {"description": "Crawler redirected to the raw image"}, 404: {"model": ErrorResponse}},
)
async def view_asset(
    date: str,
    filename: str,
    user_agent: str | None = Header(default=None),
    renderer: RenderDispatcher = Depends(get_renderer),
):
    logger.debug("View %s/%s requested by %r", date, filename, user_agent)
    result = await renderer.render(date, filename, user_agent)
    if isinstance(result, Redirect):
        return RedirectResponse(result.location, status_code=302)
    return HTMLResponse(result.html)
