"""Database session management."""

from __future__ import annotations

import asyncio
import logging
import os
import time
from collections.abc import AsyncGenerator, Iterator
from contextlib import contextmanager
from pathlib import Path

from alembic import command
from alembic.config import Config as AlembicConfig
from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from apicatalogo.config import config

logger = logging.getLogger(__name__)

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"

_LOCK_TIMEOUT_SECONDS = 30.0
_LOCK_RETRY_INTERVAL = 0.1


def to_async_url(url: str) -> str:
    """Return ``url`` rewritten for the async driver of its backend."""
    if url.startswith("sqlite+aiosqlite:"):
        return url
    if url.startswith("sqlite:"):
        return url.replace("sqlite:", "sqlite+aiosqlite:", 1)
    if url.startswith("postgresql+asyncpg:"):
        return url
    if url.startswith("postgresql:"):
        return url.replace("postgresql:", "postgresql+asyncpg:", 1)
    return url


def to_sync_url(url: str) -> str:
    """Return ``url`` rewritten for the blocking driver Alembic uses."""
    if url.startswith("sqlite+aiosqlite:"):
        url = url.replace("sqlite+aiosqlite:", "sqlite:", 1)
    elif url.startswith("postgresql+asyncpg:"):
        url = url.replace("postgresql+asyncpg:", "postgresql:", 1)

    if url.startswith("sqlite:///") and ":memory:" not in url:
        db_path = Path(url.replace("sqlite:///", "", 1)).expanduser().resolve()
        return f"sqlite:///{db_path}"

    return url


def _migration_lock_path(url: str) -> Path:
    sync_url = to_sync_url(url)
    if sync_url.startswith("sqlite:///") and ":memory:" not in sync_url:
        db_path = Path(sync_url.replace("sqlite:///", "", 1))
        return db_path.with_name(f".{db_path.name}.migrations.lock")
    return Path(".apicatalogo.migrations.lock").resolve()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores FOREIGN KEY clauses unless asked per connection."""
    module = type(dbapi_connection).__module__
    if "sqlite" not in module:
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


database_url = to_async_url(config.DATABASE_URL)

engine = create_async_engine(database_url, echo=config.DEBUG)
AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession]:
    """Yield a session scoped to a single request."""
    async with AsyncSessionLocal() as session:
        yield session


@contextmanager
def migration_lock(lock_path: Path) -> Iterator[None]:
    """Hold an exclusive lock file while the block runs.

    The file is created with ``O_EXCL``; other workers poll until it is
    removed or ``_LOCK_TIMEOUT_SECONDS`` elapse.
    """
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    deadline = time.monotonic() + _LOCK_TIMEOUT_SECONDS
    while True:
        try:
            fd = os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_RDWR)
            break
        except FileExistsError:
            if time.monotonic() > deadline:
                logger.error("Timed out waiting for migration lock %s", lock_path)
                raise TimeoutError(f"Migration lock {lock_path} is held") from None
            time.sleep(_LOCK_RETRY_INTERVAL)

    try:
        yield
    finally:
        os.close(fd)
        lock_path.unlink(missing_ok=True)


def _has_unversioned_schema(sync_url: str) -> bool:
    """True when tables exist but Alembic has never recorded a revision."""
    sync_engine = create_engine(sync_url)
    try:
        with sync_engine.connect() as connection:
            tables = set(inspect(connection).get_table_names())
    finally:
        sync_engine.dispose()
    return "alembic_version" not in tables and bool(tables)


def migrate(database_url: str) -> None:
    """Bring the schema at ``database_url`` up to the latest revision."""
    sync_url = to_sync_url(database_url)
    alembic_cfg = AlembicConfig(str(ALEMBIC_INI))
    alembic_cfg.attributes["sqlalchemy_url"] = sync_url
    alembic_cfg.attributes["configure_logger"] = False

    with migration_lock(_migration_lock_path(database_url)):
        if _has_unversioned_schema(sync_url):
            logger.info("Stamping existing catalog schema at head")
            command.stamp(alembic_cfg, "head")
        else:
            logger.info("Upgrading catalog schema")
            command.upgrade(alembic_cfg, "head")


async def init_db() -> None:
    """Apply migrations without blocking the event loop."""
    await asyncio.to_thread(migrate, config.DATABASE_URL)
