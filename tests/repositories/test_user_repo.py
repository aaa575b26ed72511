from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from usersapi.errors import NotFoundError, QueryError
from usersapi.models.user import NewUser
from usersapi.repositories.sqlalchemy import SQLAlchemyUserRepository


class TestUserRepo:
    def test_create_assigns_id_and_created_at(self, user_repo: SQLAlchemyUserRepository):
        created = user_repo.create(NewUser(username="alice", email="a@x.com"))

        assert created.id is not None
        assert created.username == "alice"
        assert created.email == "a@x.com"
        assert created.created_at is not None

    def test_create_assigns_distinct_ids(self, user_repo: SQLAlchemyUserRepository):
        first = user_repo.create(NewUser(username="alice", email="a@x.com"))
        second = user_repo.create(NewUser(username="alice", email="a@x.com"))
        assert first.id != second.id

    def test_get_by_id(self, user_repo: SQLAlchemyUserRepository):
        created = user_repo.create(NewUser(username="alice", email="a@x.com"))
        fetched = user_repo.get_by_id(created.id)

        assert fetched == created

    def test_get_by_id_not_found(self, user_repo: SQLAlchemyUserRepository):
        with pytest.raises(NotFoundError, match="Record not found"):
            user_repo.get_by_id(9999)

    def test_not_found_is_a_query_error(self, user_repo: SQLAlchemyUserRepository):
        with pytest.raises(QueryError):
            user_repo.get_by_id(9999)

    def test_update_replaces_fields(self, user_repo: SQLAlchemyUserRepository):
        created = user_repo.create(NewUser(username="alice", email="a@x.com"))
        updated = user_repo.update(created.id, NewUser(username="bob", email="b@x.com"))

        assert updated.id == created.id
        assert updated.username == "bob"
        assert updated.email == "b@x.com"
        assert updated.created_at == created.created_at
        assert user_repo.get_by_id(created.id) == updated

    def test_update_not_found(self, user_repo: SQLAlchemyUserRepository):
        with pytest.raises(NotFoundError):
            user_repo.update(9999, NewUser(username="bob", email="b@x.com"))

    def test_delete_returns_rows_affected(self, user_repo: SQLAlchemyUserRepository):
        created = user_repo.create(NewUser(username="alice", email="a@x.com"))

        assert user_repo.delete(created.id) == 1
        assert user_repo.delete(created.id) == 0

    def test_delete_nonexistent(self, user_repo: SQLAlchemyUserRepository):
        assert user_repo.delete(9999) == 0

    def test_database_failure_becomes_query_error(self):
        conn = MagicMock()
        conn.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection lost"))
        repo = SQLAlchemyUserRepository(conn)

        with pytest.raises(QueryError, match="Database error") as exc_info:
            repo.get_by_id(1)
        assert not isinstance(exc_info.value, NotFoundError)
        assert isinstance(exc_info.value.cause, OperationalError)

    def test_constraint_violation_becomes_query_error(self, user_repo: SQLAlchemyUserRepository):
        with pytest.raises(QueryError):
            user_repo.create(NewUser.model_construct(username=None, email="a@x.com"))
