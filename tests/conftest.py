"""Root conftest: SQLite engines and fixtures for the users schema."""

from __future__ import annotations

import pytest
from sqlalchemy import Connection, create_engine, text
from sqlalchemy.engine import Engine

import usersapi.offload as offload_module
from usersapi.settings import get_settings

# Matches Alembic head: 3f9a1c2b7d10 (create users)
SCHEMA_DDL = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username VARCHAR NOT NULL,
    email VARCHAR NOT NULL,
    created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""


def create_schema(engine: Engine) -> None:
    with engine.connect() as conn:
        for statement in SCHEMA_DDL.strip().split(";"):
            stmt = statement.strip()
            if stmt:
                conn.execute(text(stmt))
        conn.commit()


@pytest.fixture(autouse=True)
def _reset_process_state(monkeypatch):
    """Settings and the worker limiter are process-wide; start each test clean."""
    get_settings.cache_clear()
    monkeypatch.setattr(offload_module, "_limiter", None)
    yield
    get_settings.cache_clear()


@pytest.fixture()
def db_engine() -> Engine:
    return create_engine("sqlite:///:memory:")


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    for statement in SCHEMA_DDL.strip().split(";"):
        stmt = statement.strip()
        if stmt:
            conn.execute(text(stmt))
    conn.commit()
    yield conn
    conn.close()


@pytest.fixture()
def file_engine(tmp_path) -> Engine:
    """Pooled engine over an on-disk database, usable from worker threads."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'users.db'}",
        connect_args={"check_same_thread": False},
        pool_size=20,
        max_overflow=0,
        pool_timeout=0,
    )
    create_schema(engine)
    yield engine
    engine.dispose()
