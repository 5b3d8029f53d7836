#storefront/api/routers/carts.py
from typing import List

from fastapi import APIRouter, Depends, Response, status

from storefront.api.deps import get_lock_service, get_storage, require_user
from storefront.api.errors import http_error
from storefront.domain.errors import Forbidden, LockTimeout, NotFound, StorefrontError
from storefront.domain.schemas import (
    CartItemIn,
    CartLineOut,
    CartQuantityIn,
    CartSummaryOut,
    GuestCartIn,
)
from storefront.repos.storage import Storage
from storefront.services.cart_service import CartService
from storefront.services.identity import CurrentUser
from storefront.services.lock_service import UserLockService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(
    storage: Storage = Depends(get_storage),
    lock_service: UserLockService = Depends(get_lock_service),
) -> CartService:
    return CartService(storage=storage, lock_service=lock_service)


@router.get("", response_model=List[CartLineOut])
def list_cart(
    user: CurrentUser = Depends(require_user),
    svc: CartService = Depends(get_service),
):
    return svc.list_items(user.id)


@router.get("/summary", response_model=CartSummaryOut)
def cart_summary(
    user: CurrentUser = Depends(require_user),
    svc: CartService = Depends(get_service),
):
    return svc.cart_summary(user.id)


@router.post("/items", response_model=CartLineOut, status_code=status.HTTP_201_CREATED)
def add_item(
    payload: CartItemIn,
    user: CurrentUser = Depends(require_user),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.add_item(
            user_id=user.id,
            product_id=payload.product_id,
            quantity=payload.quantity,
            size=payload.size,
            color=payload.color,
        )
    except LockTimeout as e:
        raise http_error(409, e)
    except StorefrontError as e:
        # NotFound produktu tez jest 400 - to blad w tresci zadania
        raise http_error(400, e)


@router.put("/items/{item_id}", response_model=CartLineOut)
def update_item(
    item_id: int,
    payload: CartQuantityIn,
    user: CurrentUser = Depends(require_user),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.update_quantity(user.id, item_id, payload.quantity)
    except NotFound as e:
        raise http_error(404, e)
    except Forbidden as e:
        raise http_error(403, e)
    except LockTimeout as e:
        raise http_error(409, e)
    except StorefrontError as e:
        raise http_error(400, e)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_item(
    item_id: int,
    user: CurrentUser = Depends(require_user),
    svc: CartService = Depends(get_service),
):
    try:
        svc.remove_item(user.id, item_id)
    except NotFound as e:
        raise http_error(404, e)
    except Forbidden as e:
        raise http_error(403, e)
    except LockTimeout as e:
        raise http_error(409, e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_cart(
    user: CurrentUser = Depends(require_user),
    svc: CartService = Depends(get_service),
):
    try:
        svc.clear_cart(user.id)
    except LockTimeout as e:
        raise http_error(409, e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/merge", response_model=List[CartLineOut])
def merge_guest_cart(
    payload: GuestCartIn,
    user: CurrentUser = Depends(require_user),
    svc: CartService = Depends(get_service),
):
    """Koszyk goscia -> koszyk usera po zalogowaniu."""
    try:
        return svc.merge_guest_cart(user.id, payload.items)
    except LockTimeout as e:
        raise http_error(409, e)
    except StorefrontError as e:
        raise http_error(400, e)
