"""Alembic environment for the DocMan review schema.

The database URL comes from DocmanConfig, so migrations target the same
database as the API and the ``docman`` CLI. Pass ``-x config=path/to.toml``
to migrate a database described by a specific config file.

SQLite databases are migrated in batch mode, since SQLite cannot alter
constraints in place, and with foreign key enforcement switched on so the
ON DELETE actions on review assignments are honoured.
"""

from __future__ import annotations

import asyncio
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import event, pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from docman.config import load_config
from docman.database.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

x_args = context.get_x_argument(as_dictionary=True)
config_path = Path(x_args["config"]) if "config" in x_args else None
database_url = load_config(config_path).database.url
is_sqlite = database_url.startswith("sqlite")

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit the migration SQL as a script instead of running it."""
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=is_sqlite,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=is_sqlite,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Apply pending revisions over a single unpooled async connection."""
    connectable = create_async_engine(database_url, poolclass=pool.NullPool)

    if is_sqlite:

        @event.listens_for(connectable.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_async_migrations())
