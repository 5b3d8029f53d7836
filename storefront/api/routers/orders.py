# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, status

from storefront.api.deps import get_lock_service, get_storage, require_user
from storefront.api.errors import http_error
from storefront.domain.errors import Forbidden, LockTimeout, NotFound, StorefrontError
from storefront.domain.schemas import OrderCreate, OrderOut
from storefront.repos.storage import Storage
from storefront.services.identity import CurrentUser
from storefront.services.lock_service import UserLockService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(
    storage: Storage = Depends(get_storage),
    lock_service: UserLockService = Depends(get_lock_service),
) -> OrderService:
    return OrderService(storage=storage, lock_service=lock_service)


@router.post("", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
def place_order(
    payload: OrderCreate,
    user: CurrentUser = Depends(require_user),
    svc: OrderService = Depends(get_service),
):
    """
    Składa zamówienie z aktualnego koszyka i czyści koszyk.
    Total liczony po stronie serwera, platnosc tylko przyjmowana.
    """
    try:
        return svc.place_order(
            user_id=user.id,
            shipping_address=payload.shipping_address,
            payment_details=payload.payment,
            delivery_method=payload.delivery_method,
        )
    except LockTimeout as e:
        raise http_error(409, e)
    except StorefrontError as e:
        raise http_error(400, e)


@router.get("", response_model=List[OrderOut])
def list_orders(
    user: CurrentUser = Depends(require_user),
    svc: OrderService = Depends(get_service),
):
    return svc.list_orders(user.id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: CurrentUser = Depends(require_user),
    svc: OrderService = Depends(get_service),
):
    """
    Pobiera szczegóły zamówienia (wlasciciel albo admin).
    """
    try:
        return svc.get_order(order_id, user)
    except Forbidden as e:
        raise http_error(403, e)
    except NotFound as e:
        raise http_error(404, e)
