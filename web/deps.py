from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from usersapi.db import acquire, get_engine
from usersapi.repositories.sqlalchemy import SQLAlchemyUserRepository


@asynccontextmanager
async def user_repository() -> AsyncIterator[SQLAlchemyUserRepository]:
    """Repository bound to a freshly checked-out connection for one operation."""
    async with acquire(get_engine()) as conn:
        yield SQLAlchemyUserRepository(conn)
