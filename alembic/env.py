"""
Alembic Environment for the Catalog Schema

The database URL comes from catalog settings (DATABASE_URL), never from
alembic.ini, so migrations always run against the same database as the
API.

Typical use:
- alembic upgrade head                           # create / update tables
- alembic revision --autogenerate -m "message"   # after changing models
- alembic upgrade head --sql > catalog.sql       # offline SQL script

Development servers can skip migrations entirely and rely on
DATABASE_AUTO_CREATE, which calls Base.metadata.create_all() at startup.
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from catalog.config import get_settings
from catalog.database import Base

# Every table must be registered on Base.metadata before autogenerate compares
from catalog.models import Author, Book, BookGenre, ImageChunk, ImageFile, User  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", get_settings().database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL for the catalog schema without connecting."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a live, unpooled connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
