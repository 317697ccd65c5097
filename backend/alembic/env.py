"""
Alembic Migration Environment
===============================

What:  Migrates the social schema (users, posts, comments, likes) through the
       same async drivers the API uses: asyncpg in production, aiosqlite for
       local SQLite files.
How:   The URL always comes from `socialnet.config.settings` (DATABASE_URL),
       never from alembic.ini, so the app and its migrations cannot point at
       different databases. `socialnet.models` is imported for its side effect
       of registering all four tables on `Base.metadata`.
SQLite: migrations run in batch mode (copy, recreate, rename) because SQLite
       cannot ALTER constraints. Foreign keys stay off for the migration
       connection (no `PRAGMA foreign_keys=ON` listener), so rebuilding a
       parent table never cascades into its children.
Usage: cd backend && alembic upgrade head
       DATABASE_URL=sqlite+aiosqlite:///./social.db alembic upgrade head
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from socialnet.config import settings
from socialnet.database import Base

# Registers users, posts, comments and likes on Base.metadata (--autogenerate)
import socialnet.models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

config.set_main_option("sqlalchemy.url", settings.database_url)


def run_migrations_offline() -> None:
    """Emits the migration SQL to stdout without connecting (`alembic upgrade head --sql`)."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        # SQLite cannot ALTER constraints in place
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        # One-shot connection; the app's pool settings do not apply
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
