"""Reusable FastAPI dependencies."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from camdn.core.config import Settings
from camdn.core.container import ApplicationContainer
from camdn.infrastructure.database.session import get_session
from camdn.modules.assets import RenderDispatcher, UploadPipeline
from camdn.modules.links import ShortLinkService


def get_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


def get_app_settings(container: ApplicationContainer = Depends(get_container)) -> Settings:
    return container.settings


def get_pipeline(container: ApplicationContainer = Depends(get_container)) -> UploadPipeline:
    return container.pipeline


def get_renderer(container: ApplicationContainer = Depends(get_container)) -> RenderDispatcher:
    return container.renderer


get_db_session = get_session


def get_link_service(db: AsyncSession = Depends(get_db_session)) -> ShortLinkService:
    return ShortLinkService.with_session(db)


__all__ = [
    "get_container",
    "get_app_settings",
    "get_pipeline",
    "get_renderer",
    "get_db_session",
    "get_link_service",
]
