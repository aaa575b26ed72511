import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from alembic.config import Config
from sqlalchemy import Connection, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool

from alembic import command
from usersapi.errors import PoolError
from usersapi.offload import run_blocking
from usersapi.settings import Settings, get_settings

logger = logging.getLogger(__name__)

_engine: Engine | None = None


def _normalize_url(url: str) -> str:
    """Point bare Postgres URLs (``postgres://``, ``postgresql://``) at psycopg 3."""
    for scheme in ("postgres://", "postgresql://"):
        if url.startswith(scheme):
            return "postgresql+psycopg://" + url[len(scheme) :]
    return url


def build_engine(settings: Settings) -> Engine:
    """Create an engine backed by a bounded pool; no overflow connections."""
    return create_engine(
        _normalize_url(settings.database_url),
        poolclass=QueuePool,
        pool_size=settings.pool_size,
        max_overflow=0,
        pool_timeout=settings.pool_timeout,
        pool_pre_ping=True,
        pool_recycle=settings.pool_recycle,
    )


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = build_engine(settings)
        logger.info("Database engine created (pool_size=%d, pool_timeout=%ss)", settings.pool_size, settings.pool_timeout)
    return _engine


def dispose_engine() -> None:
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None
        logger.info("Database engine disposed")


def _connect(engine: Engine) -> Connection:
    try:
        return engine.connect()
    except SQLAlchemyError as exc:
        logger.warning("Connection checkout failed: %s", exc)
        raise PoolError(exc) from exc


@asynccontextmanager
async def acquire(engine: Engine) -> AsyncIterator[Connection]:
    """Check a connection out of the pool for the duration of the block.

    Checkout and release both run on a worker thread: connecting, the pre-ping
    and the reset on return all talk to the database. Raises ``PoolError`` if no
    connection can be had. The connection goes back to the pool when the block
    exits, whether it returns, raises or is cancelled.
    """
    conn = await run_blocking(_connect, engine)
    logger.debug("Connection checked out")
    try:
        yield conn
    finally:
        with anyio.CancelScope(shield=True):
            await run_blocking(conn.close)
        logger.debug("Connection returned to pool")


def _get_alembic_config() -> Config:
    """Build Alembic config pointing at the project root alembic.ini."""
    project_root = os.path.dirname(os.path.dirname(__file__))
    ini_path = os.path.join(project_root, "alembic.ini")
    if not os.path.exists(ini_path):
        ini_path = os.path.join(os.getcwd(), "alembic.ini")
    cfg = Config(ini_path)
    # Keep the logging set up by configure_logging().
    cfg.attributes["configure_logger"] = False
    return cfg


def initialize_db() -> None:
    """Run all pending Alembic migrations."""
    logger.info("Running Alembic migrations")
    cfg = _get_alembic_config()
    command.upgrade(cfg, "head")
    logger.info("Migrations complete")
