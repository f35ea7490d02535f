"""SQLAlchemy implementation of the asset dimension cache."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql.dml import Insert

from camdn.db.models import AssetSize as AssetSizeModel
from camdn.modules.assets.models import DimensionRecord
from camdn.modules.assets.repository import DimensionCache

_INSERT_IGNORE_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def insert_ignore_statement(dialect_name: str, values: dict[str, Any]) -> Insert | None:
    """``INSERT ... ON CONFLICT (path) DO NOTHING`` for dialects that support it, else ``None``."""
    insert = _INSERT_IGNORE_DIALECTS.get(dialect_name)
    if insert is None:
        return None
    return insert(AssetSizeModel).values(**values).on_conflict_do_nothing(index_elements=[AssetSizeModel.path])


class SqlDimensionCache(DimensionCache):
    """Dimension cache backed by the ``asset_size_cache`` table.

    Every call runs in its own short-lived session so cache access is never
    tied to a request transaction. Duplicate inserts are ignored; on backends
    without ``ON CONFLICT`` the losing insert is rolled back instead.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, path: str) -> DimensionRecord | None:
        stmt = select(AssetSizeModel).where(AssetSizeModel.path == path)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()
        return self._to_domain(model)

    async def put(self, path: str, width: int, height: int) -> None:
        values = {"path": path, "width": max(width, 0), "height": max(height, 0)}
        async with self._session_factory() as session:
            stmt = insert_ignore_statement(session.bind.dialect.name, values)
            if stmt is not None:
                await session.execute(stmt)
                await session.commit()
                return

            session.add(AssetSizeModel(**values))
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()

    @staticmethod
    def _to_domain(model: AssetSizeModel | None) -> DimensionRecord | None:
        if model is None:
            return None
        return DimensionRecord(path=model.path, width=model.width or 0, height=model.height or 0)
