# storefront/api/deps.py
from fastapi import Depends, Request

from storefront.api.errors import http_error
from storefront.data.database import SessionLocal
from storefront.domain.errors import Forbidden, Unauthenticated
from storefront.repos.storage import MemoryStorage, SqlStorage, Storage
from storefront.services.identity import CurrentUser, HeaderIdentityProvider
from storefront.services.lock_service import UserLockService, build_lock_service
from storefront.utils.settings import STORAGE_BACKEND

# jeden magazyn w pamieci i jeden serwis lockow na proces
_memory_storage = MemoryStorage()
_lock_service = build_lock_service()


def get_storage():
    if STORAGE_BACKEND == "sql":
        db = SessionLocal()
        try:
            yield SqlStorage(db)
        finally:
            db.close()
    else:
        yield _memory_storage


def get_lock_service() -> UserLockService:
    return _lock_service


def get_current_user(request: Request, storage: Storage = Depends(get_storage)) -> CurrentUser | None:
    return HeaderIdentityProvider(storage).current_user(request)


def require_user(user: CurrentUser | None = Depends(get_current_user)) -> CurrentUser:
    if user is None:
        raise http_error(401, Unauthenticated("Unauthorized"))
    return user


def require_admin(user: CurrentUser = Depends(require_user)) -> CurrentUser:
    if not user.is_admin:
        raise http_error(403, Forbidden("Admin access required"))
    return user
