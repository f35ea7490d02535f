"""Viewer page rendering with read-through dimension caching."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from markupsafe import Markup
from starlette.templating import Jinja2Templates

from .exceptions import AssetNotFoundError
from .models import Dimensions, StoredAsset, is_probeable, mime_category
from .paths import resolve_asset
from .prober import DimensionProber
from .repository import DimensionCache

logger = logging.getLogger(__name__)

AUDIO_ICON_URL = "/music.jpg"


@dataclass(frozen=True, slots=True)
class ViewPage:
    html: str


@dataclass(frozen=True, slots=True)
class Redirect:
    location: str


@dataclass(slots=True)
class TextPreview:
    content: str
    truncated: bool


@dataclass(slots=True)
class ViewModel:
    """Everything the viewer templates need for one asset."""

    asset: StoredAsset
    mime_type: str
    site_name: str
    base_url: str
    dimensions: Dimensions = field(default_factory=Dimensions.unknown)
    text: TextPreview | None = None
    has_thumbnail: bool = False

    @property
    def category(self) -> str:
        return mime_category(self.mime_type)

    @property
    def title(self) -> str:
        return f"{self.site_name} - {self.asset.filename}"

    @property
    def page_url(self) -> str:
        return self.base_url + self.asset.view_url

    @property
    def media_url(self) -> str:
        return self.base_url + self.asset.raw_url

    @property
    def poster_url(self) -> str | None:
        return self.base_url + self.asset.thumbnail_url if self.has_thumbnail else None

    @property
    def audio_icon_url(self) -> str:
        return self.base_url + AUDIO_ICON_URL


def _read_text(path: Path, limit: int) -> TextPreview:
    with path.open("rb") as stream:
        data = stream.read(limit + 1)
    truncated = len(data) > limit
    return TextPreview(content=data[:limit].decode("utf-8", errors="replace"), truncated=truncated)


def is_crawler(user_agent: str | None, patterns: Sequence[str]) -> bool:
    if not user_agent:
        return False
    lowered = user_agent.lower()
    return any(pattern.lower() in lowered for pattern in patterns if pattern)


class RenderDispatcher:
    def __init__(
        self,
        cache: DimensionCache,
        prober: DimensionProber,
        storage_root: Path,
        templates: Jinja2Templates,
        site_name: str = "CamDN",
        public_base_url: str = "",
        crawler_user_agents: Sequence[str] = (),
        text_preview_limit: int = 1024 * 1024,
    ) -> None:
        self.cache = cache
        self.prober = prober
        self.storage_root = storage_root
        self.templates = templates
        self.site_name = site_name
        self.public_base_url = public_base_url.rstrip("/")
        self.crawler_user_agents = tuple(crawler_user_agents)
        self.text_preview_limit = text_preview_limit

    async def render(self, date: str, filename: str, user_agent: str | None) -> ViewPage | Redirect:
        asset = resolve_asset(self.storage_root, date, filename)
        if not asset.file_path.is_file():
            raise AssetNotFoundError(asset.relative_path)

        mime_type = asset.mime_type
        category = mime_category(mime_type)
        if category == "image" and is_crawler(user_agent, self.crawler_user_agents):
            return Redirect(asset.raw_url)

        view = ViewModel(
            asset=asset,
            mime_type=mime_type,
            site_name=self.site_name,
            base_url=self.public_base_url,
        )
        if is_probeable(mime_type):
            view.dimensions = await self.dimensions_for(asset, mime_type)
        if category == "video":
            view.has_thumbnail = asset.thumbnail_path.is_file()
        elif category == "text":
            view.text = await asyncio.to_thread(_read_text, asset.file_path, self.text_preview_limit)

        return ViewPage(html=self.render_html(view))

    async def dimensions_for(self, asset: StoredAsset, mime_type: str) -> Dimensions:
        key = asset.relative_path
        record = await self.cache.get(key)
        if record is not None:
            return record.dimensions

        dimensions = await self.prober.probe(asset.file_path, mime_type)
        await self.cache.put(key, dimensions.width, dimensions.height)
        logger.debug("Cached dimensions %dx%d for %s", dimensions.width, dimensions.height, key)
        return dimensions

    def render_html(self, view: ViewModel) -> str:
        env = self.templates.env
        file_content = env.get_template("partials/embed.html").render(view=view)
        og_tags = env.get_template("partials/og_tags.html").render(view=view)
        return env.get_template("view.html").render(
            fileContent=Markup(file_content),
            ogTags=Markup(og_tags),
            filename=view.asset.filename,
            joinedPath=view.asset.relative_path,
            siteName=self.site_name,
        )
