from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Connection, DateTime, Integer, String, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import SQLAlchemyError

from usersapi.errors import NotFoundError, QueryError
from usersapi.models.user import NewUser, User
from usersapi.repositories.base import UserRepository

_USER_COLUMNS = dict(id=Integer, username=String, email=String, created_at=DateTime)
_RETURNING = "RETURNING id, username, email, created_at"


@contextmanager
def _query_errors() -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise QueryError(exc) from exc


class SQLAlchemyUserRepository(UserRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _row_to_user(row: RowMapping) -> User:
        return User(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            created_at=row["created_at"],
        )

    def create(self, new_user: NewUser) -> User:
        with _query_errors():
            row = (
                self.conn.execute(
                    text(f"INSERT INTO users (username, email) VALUES (:username, :email) {_RETURNING}").columns(
                        **_USER_COLUMNS
                    ),
                    {"username": new_user.username, "email": new_user.email},
                )
                .mappings()
                .one()
            )
            self.conn.commit()
        return self._row_to_user(row)

    def get_by_id(self, user_id: int) -> User:
        with _query_errors():
            row = (
                self.conn.execute(
                    text("SELECT id, username, email, created_at FROM users WHERE id = :id").columns(**_USER_COLUMNS),
                    {"id": user_id},
                )
                .mappings()
                .fetchone()
            )
        if row is None:
            raise NotFoundError()
        return self._row_to_user(row)

    def update(self, user_id: int, new_user: NewUser) -> User:
        with _query_errors():
            row = (
                self.conn.execute(
                    text(f"UPDATE users SET username = :username, email = :email WHERE id = :id {_RETURNING}").columns(
                        **_USER_COLUMNS
                    ),
                    {"id": user_id, "username": new_user.username, "email": new_user.email},
                )
                .mappings()
                .one_or_none()
            )
            self.conn.commit()
        if row is None:
            raise NotFoundError()
        return self._row_to_user(row)

    def delete(self, user_id: int) -> int:
        with _query_errors():
            result = self.conn.execute(
                text("DELETE FROM users WHERE id = :id"),
                {"id": user_id},
            )
            self.conn.commit()
        return result.rowcount
