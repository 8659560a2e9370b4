"""Alembic environment for the storefront schema.

`migration.runner.migrate` hands over an open connection through
``config.attributes["connection"]``; the plain `alembic` CLI falls back to
``sqlalchemy.url`` from the config.
"""
from alembic import context
from sqlalchemy import engine_from_config, pool

from storefront import legacy, models  # noqa: F401  (register tables on Base.metadata)
from storefront.db import Base
from storefront.vector import HNSW_INDEX_NAME

config = context.config
target_metadata = Base.metadata


def include_object(object, name, type_, reflected, compare_to):
    # Created by raw DDL in a revision; autogenerate must not try to drop it
    if type_ == "index" and name == HNSW_INDEX_NAME:
        return False
    return True


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        include_object=include_object,
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        include_object=include_object,
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connection = config.attributes.get("connection")
    if connection is not None:
        do_run_migrations(connection)
        return

    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        do_run_migrations(connection)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
