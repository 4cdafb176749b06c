"""Alembic env: runs on a sync driver (psycopg2 / pysqlite) while the app uses async ones."""
from logging.config import fileConfig
import os

from alembic import context
from sqlalchemy import engine_from_config, pool

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

from codecraft.db.base import Base  # noqa: E402
from codecraft.core.config import get_settings  # noqa: E402

target_metadata = Base.metadata

# async driver prefix -> sync driver prefix
SYNC_DRIVERS = {
    "postgresql+asyncpg://": "postgresql+psycopg2://",
    "sqlite+aiosqlite://": "sqlite://",
}


def to_sync_url(url: str) -> str:
    for async_prefix, sync_prefix in SYNC_DRIVERS.items():
        if url.startswith(async_prefix):
            return sync_prefix + url[len(async_prefix):]
    return url


def get_url() -> str:
    # ALEMBIC_DATABASE_URL wins, then the app's DATABASE_URL, then alembic.ini
    explicit = os.getenv("ALEMBIC_DATABASE_URL")
    if explicit:
        return explicit

    app_url = get_settings().database_url
    if app_url:
        return to_sync_url(app_url)

    return config.get_main_option("sqlalchemy.url")


def run_migrations_offline() -> None:
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section) or {}
    section["sqlalchemy.url"] = get_url()

    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            # SQLite cannot ALTER most constraints in place
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
