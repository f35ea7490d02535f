"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from starlette.templating import Jinja2Templates

from camdn.core.config import Settings
from camdn.infrastructure.database.repositories import SqlDimensionCache
from camdn.infrastructure.database.session import build_engine, build_session_factory, init_db
from camdn.modules.assets import DimensionCache, DimensionProber, RenderDispatcher, UploadPipeline
from camdn.modules.assets.tools import CommandRunner, run_tool

WEB_DIR = Path(__file__).resolve().parent.parent / "web"
TEMPLATE_DIR = WEB_DIR / "templates"
STATIC_DIR = WEB_DIR / "static"


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    templates: Jinja2Templates
    cache: DimensionCache
    prober: DimensionProber
    pipeline: UploadPipeline
    renderer: RenderDispatcher

    async def init_infrastructure(self) -> None:
        """Ensure storage and database tables exist."""
        self.settings.upload_root.mkdir(parents=True, exist_ok=True)
        await init_db(self.engine)

    async def dispose(self) -> None:
        await self.engine.dispose()


def build_container(
    settings: Settings,
    *,
    cache: DimensionCache | None = None,
    prober: DimensionProber | None = None,
    runner: CommandRunner = run_tool,
    today: Callable[[], date] = date.today,
) -> ApplicationContainer:
    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
    storage_root = settings.upload_root

    cache = cache if cache is not None else SqlDimensionCache(session_factory)
    prober = prober if prober is not None else DimensionProber(
        ffprobe_bin=settings.probe.ffprobe_bin,
        timeout=settings.probe.timeout,
        runner=runner,
    )
    pipeline = UploadPipeline(
        storage_root,
        public_base_url=settings.public_base_url,
        ffmpeg_bin=settings.probe.ffmpeg_bin,
        thumbnail_timeout=settings.probe.thumbnail_timeout,
        runner=runner,
        today=today,
    )
    renderer = RenderDispatcher(
        cache,
        prober,
        storage_root,
        templates,
        site_name=settings.site_name,
        public_base_url=settings.public_base_url,
        crawler_user_agents=settings.crawler_user_agents,
        text_preview_limit=settings.text_preview_limit,
    )
    return ApplicationContainer(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        templates=templates,
        cache=cache,
        prober=prober,
        pipeline=pipeline,
        renderer=renderer,
    )


__all__ = ["ApplicationContainer", "build_container", "STATIC_DIR", "TEMPLATE_DIR"]
