from logging.config import fileConfig

import asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context
from scoreboard.core.config import Settings
from scoreboard.db.base import Base
from scoreboard.models import game, team  # noqa: F401


# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
# This line sets up loggers basically.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def database_url() -> str:
    # sqlalchemy.url in alembic.ini wins over the environment
    return config.get_main_option("sqlalchemy.url") or Settings().DATABASE_URL


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode (generates SQL scripts)."""
    context.configure(
        url=database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    """Helper for async migration"""
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode with async engine."""

    async def async_run():
        engine = create_async_engine(database_url())
        # Alembic expects a sync connection, so we use run_sync
        async with engine.begin() as conn:
            await conn.run_sync(do_run_migrations)
        await engine.dispose()

    asyncio.run(async_run())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
