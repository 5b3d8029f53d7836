from datetime import datetime, timezone

from storefront.data.models.user import UserModel
from storefront.domain.errors import Conflict, NotFound
from storefront.domain.schemas import UserCreate, UserRead
from storefront.repos.storage import Storage
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, storage: Storage):
        self.storage = storage
        self.repo = storage.users

    def create_user(self, payload: UserCreate, is_admin: bool = False) -> UserRead:
        with self.storage.transaction():
            if self.repo.get_user_by_username(payload.username):
                raise Conflict("Username already taken")
            if self.repo.get_user_by_email(payload.email):
                raise Conflict("Email already registered")

            created = self.repo.create_user(
                UserModel(
                    username=payload.username,
                    email=payload.email,
                    is_admin=is_admin,
                    created_at=datetime.now(timezone.utc),
                )
            )

        logger.info(f"Registered user {created.id} ({created.username})")
        return UserRead.model_validate(created)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFound("User not found")
        return UserRead.model_validate(user)
