"""Alembic environment running against the application's async engine."""

from __future__ import annotations

import asyncio
from logging.config import fileConfig
from typing import Any

from alembic import context
from sqlalchemy.engine import Connection, make_url

from vod.core.config import get_settings
from vod.infrastructure.database import models  # noqa: F401
from vod.infrastructure.database.base import Base
from vod.infrastructure.database.session import dispose_engine, get_engine

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _sync_url() -> str:
    # offline mode renders SQL without a driver, so drop the async dialect suffix
    url = make_url(get_settings().database.url)
    return url.set(drivername=url.get_backend_name()).render_as_string(hide_password=False)


def _run(**options: Any) -> None:
    context.configure(target_metadata=Base.metadata, **options)
    with context.begin_transaction():
        context.run_migrations()


def _run_with_connection(connection: Connection) -> None:
    _run(connection=connection, render_as_batch=connection.dialect.name == "sqlite")


async def _run_online() -> None:
    try:
        async with get_engine().connect() as connection:
            await connection.run_sync(_run_with_connection)
    finally:
        await dispose_engine()


if context.is_offline_mode():
    url = _sync_url()
    _run(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=url.startswith("sqlite"),
    )
else:
    asyncio.run(_run_online())
