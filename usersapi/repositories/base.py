from abc import ABC, abstractmethod

from usersapi.models.user import NewUser, User


class UserRepository(ABC):
    @abstractmethod
    def create(self, new_user: NewUser) -> User: ...

    @abstractmethod
    def get_by_id(self, user_id: int) -> User: ...

    @abstractmethod
    def update(self, user_id: int, new_user: NewUser) -> User: ...

    @abstractmethod
    def delete(self, user_id: int) -> int: ...
