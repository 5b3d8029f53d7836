# storefront/api/routers/admin.py
from typing import List

from fastapi import APIRouter, Depends

from storefront.api.deps import require_admin
from storefront.api.errors import http_error
from storefront.api.routers.orders import get_service
from storefront.domain.errors import InvalidStatusTransition, NotFound
from storefront.domain.schemas import OrderOut, OrderStatusIn
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/orders", response_model=List[OrderOut])
def list_all_orders(svc: OrderService = Depends(get_service)):
    return svc.list_all_orders()


@router.patch("/orders/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusIn,
    svc: OrderService = Depends(get_service),
):
    """Reczna zmiana statusu, tylko dozwolone przejscia."""
    try:
        return svc.update_status(order_id, payload.status)
    except NotFound as e:
        raise http_error(404, e)
    except InvalidStatusTransition as e:
        raise http_error(400, e)
