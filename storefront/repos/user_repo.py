from abc import ABC, abstractmethod

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import Conflict
from storefront.repos.memory import MemoryTables


class UserRepository(ABC):
    @abstractmethod
    def get_user(self, user_id: int) -> UserModel | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> UserModel | None: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> UserModel | None: ...

    @abstractmethod
    def create_user(self, user: UserModel) -> UserModel: ...


class MemoryUserRepo(UserRepository):
    def __init__(self, tables: MemoryTables):
        self.tables = tables

    def _find(self, field: str, value: str) -> UserModel | None:
        with self.tables.lock:
            for user in self.tables.rows["users"].values():
                if getattr(user, field).lower() == value.lower():
                    return user
            return None

    def get_user(self, user_id: int) -> UserModel | None:
        with self.tables.lock:
            return self.tables.rows["users"].get(user_id)

    def get_user_by_username(self, username: str) -> UserModel | None:
        return self._find("username", username)

    def get_user_by_email(self, email: str) -> UserModel | None:
        return self._find("email", email)

    def create_user(self, user: UserModel) -> UserModel:
        # odpowiednik unique index w SQL: sprawdzenie i zapis pod jednym lockiem
        with self.tables.lock:
            if self._find("username", user.username) or self._find("email", user.email):
                raise Conflict("Username or email already registered")
            return self.tables.insert("users", user)


class SqlUserRepo(UserRepository):
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_user_by_username(self, username: str) -> UserModel | None:
        stmt = select(UserModel).where(func.lower(UserModel.username) == username.lower())
        return self.db.execute(stmt).scalar_one_or_none()

    def get_user_by_email(self, email: str) -> UserModel | None:
        stmt = select(UserModel).where(func.lower(UserModel.email) == email.lower())
        return self.db.execute(stmt).scalar_one_or_none()

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.flush()
        return user
