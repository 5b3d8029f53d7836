from fastapi import APIRouter, Depends, status

from storefront.api.deps import get_storage, require_user
from storefront.api.errors import http_error
from storefront.domain.errors import Conflict, NotFound
from storefront.domain.schemas import UserCreate, UserRead
from storefront.repos.storage import Storage
from storefront.services.identity import CurrentUser
from storefront.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, storage: Storage = Depends(get_storage)):
    service = UserService(storage)
    try:
        return service.create_user(payload)
    except Conflict as e:
        raise http_error(400, e)


@router.get("/me", response_model=UserRead)
def get_me(user: CurrentUser = Depends(require_user), storage: Storage = Depends(get_storage)):
    service = UserService(storage)
    try:
        return service.get_user(user.id)
    except NotFound as e:
        raise http_error(404, e)
