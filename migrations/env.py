"""Alembic environment for the Newsdesk schema.

``alembic.ini`` puts ``src/`` on the import path. The database URL comes from
``ALEMBIC_URL`` when set, otherwise from the application settings.
"""
from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from newsdesk.core.settings import settings
from newsdesk.db.session import Base, timeout_connect_args

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def migration_url() -> str:
    """Return the URL migrations run against."""
    return os.getenv("ALEMBIC_URL") or settings.database_url_sync


def include_object(obj, name, type_, reflected, compare_to):
    """Leave Alembic's bookkeeping table out of autogenerate output."""
    return not (type_ == "table" and name == "alembic_version")


def run_migrations_offline() -> None:
    """Emit migration SQL without connecting."""
    context.configure(
        url=migration_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a connection bounded by the command timeout."""
    url = migration_url()
    connectable = create_engine(
        url,
        poolclass=pool.NullPool,
        connect_args=timeout_connect_args(url, settings.db_command_timeout_seconds),
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            include_object=include_object,
            # SQLite cannot ALTER most constraints in place.
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
