"""Alembic environment for the dimension cache and short link tables.

The database URL comes from CamDN settings (``DATABASE__URL``) unless
``alembic -x db_url=...`` overrides it.
"""

from __future__ import annotations

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from camdn.core.config import get_settings
from camdn.db import models  # noqa: F401
from camdn.infrastructure.database.base import Base
from camdn.infrastructure.database.session import build_engine

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _async_url() -> str | None:
    return context.get_x_argument(as_dictionary=True).get("db_url")


def _offline_url() -> str:
    url = make_url(_async_url() or get_settings().database_url)
    # offline SQL generation only needs the dialect, not the async driver
    return url.set(drivername=url.get_backend_name()).render_as_string(hide_password=False)


def run_migrations_offline() -> None:
    context.configure(
        url=_offline_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def _configure_and_run(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=True,
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    override = _async_url()
    engine: AsyncEngine = create_async_engine(override) if override else build_engine(get_settings())
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_configure_and_run)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
