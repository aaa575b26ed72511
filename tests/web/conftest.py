"""Web test fixtures: TestClient over a pooled on-disk SQLite database."""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def web_test_db(monkeypatch, file_engine):
    """Point the web app at the test engine and skip migrations."""
    monkeypatch.setenv("DATABASE_URL", "sqlite://")

    import web.deps as deps_module

    monkeypatch.setattr(deps_module, "get_engine", lambda: file_engine)

    import web.app as app_module

    monkeypatch.setattr(app_module, "initialize_db", lambda: None)
    monkeypatch.setattr(app_module, "configure_logging", lambda settings: None)

    yield file_engine


@pytest.fixture()
def test_engine(web_test_db):
    """Expose the test engine for helpers that need direct DB access."""
    return web_test_db


@pytest.fixture()
def client():
    from starlette.testclient import TestClient

    from web.app import app

    return TestClient(app)
