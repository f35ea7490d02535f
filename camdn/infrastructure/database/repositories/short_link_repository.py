"""SQLAlchemy implementation of the short link repository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from camdn.db.models import ShortUrl as ShortUrlModel
from camdn.modules.links.models import ShortLink
from camdn.modules.links.repository import ShortLinkRepository


class SqlShortLinkRepository(ShortLinkRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, short_id: str) -> ShortLink | None:
        stmt = select(ShortUrlModel).where(ShortUrlModel.short_id == short_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def create(self, *, short_id: str, url: str) -> ShortLink:
        model = ShortUrlModel(short_id=short_id, url=url)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    @staticmethod
    def _to_domain(model: ShortUrlModel) -> ShortLink:
        return ShortLink(short_id=model.short_id, url=model.url, created_at=model.created_at)
