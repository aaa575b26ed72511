"""Single error type for every backend failure the HTTP layer can see.

Each subclass stands for one failure source and keeps the underlying cause, so
callers can log the specific kind while the web layer renders them all the same way.
"""

from __future__ import annotations

_BACKGROUND_MARKER = " (Background on this error at:"


def _describe(cause: BaseException | str) -> str:
    """Short, human-readable text for ``cause``.

    SQLAlchemy errors carry the statement, bound parameters and a docs link in
    their string form; only the driver's own message is kept.
    """
    orig = getattr(cause, "orig", None)
    text = str(orig) if orig is not None else str(cause)
    first_line = text.splitlines()[0] if text else ""
    return first_line.split(_BACKGROUND_MARKER)[0]


class ApiError(Exception):
    kind = "api"
    prefix = "API error"

    def __init__(self, cause: BaseException | str) -> None:
        super().__init__(cause)
        self.cause = cause

    def __str__(self) -> str:
        return f"{self.prefix}: {_describe(self.cause)}"


class ConfigError(ApiError):
    kind = "config"
    prefix = "Configuration error"


class PoolError(ApiError):
    kind = "pool"
    prefix = "Pool error"


class QueryError(ApiError):
    kind = "query"
    prefix = "Database error"


class NotFoundError(QueryError):
    """No row matched the query. Still a ``QueryError`` for read and update."""

    kind = "not_found"

    def __init__(self, cause: BaseException | str = "Record not found") -> None:
        super().__init__(cause)


class OffloadError(ApiError):
    kind = "offload"
    prefix = "Blocking error"
