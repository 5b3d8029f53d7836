# storefront/services/order_service.py
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.enums import DeliveryMethod, OrderStatus, ORDER_TRANSITIONS
from storefront.domain.errors import (
    EmptyCart,
    Forbidden,
    InvalidPayment,
    InvalidStatusTransition,
    NotFound,
    OutOfStock,
)
from storefront.repos.storage import Storage
from storefront.services.identity import CurrentUser
from storefront.services.lock_service import UserLockService
from storefront.services.pricing import compute_totals, to_money
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.
    Separacja od CartService: koszyk -> zamowienie to jedna operacja pod lockiem usera.
    """

    def __init__(self, storage: Storage, lock_service: UserLockService):
        self.storage = storage
        self.repo = storage.orders
        self.carts = storage.carts
        self.products = storage.products
        self.lock_service = lock_service

    def place_order(
        self,
        user_id: int,
        shipping_address: str,
        payment_details: Mapping[str, Any],
        delivery_method: DeliveryMethod = DeliveryMethod.STANDARD,
    ) -> Dict[str, Any]:
        """
        Use Case: Tworzenie zamówienia z koszyka.

        1. Snapshot pozycji koszyka (pusty koszyk -> EmptyCart)
        2. Aktualna cena kazdego produktu, liczy total
        3. W jednej transakcji: zamowienie + pozycje + czyszczenie koszyka
        4. Zwraca zamowienie z pozycjami

        Blad w kroku 3 = rollback: brak zamowienia, koszyk nietkniety.
        """
        with self.lock_service.hold(user_id):
            cart_items = self.carts.get_items(user_id)
            if not cart_items:
                logger.warning(f"User {user_id} tried to check out an empty cart")
                raise EmptyCart("Cannot place an order with an empty cart")

            if not payment_details:
                raise InvalidPayment("Payment details are required")

            # cena jednostkowa z chwili zamowienia, ta sama w total i w order_items
            priced = []
            for item in cart_items:
                product = self.products.get_product(item.product_id)
                if not product:
                    raise NotFound(f"Product {item.product_id} in cart no longer exists")
                if not product.in_stock:
                    raise OutOfStock(f"Product {item.product_id} is out of stock")
                priced.append((item, to_money(product.price)))

            totals = compute_totals(
                ((price, item.quantity) for item, price in priced),
                delivery_method,
            )

            try:
                with self.storage.transaction():
                    order = self.repo.create_order(
                        OrderModel(
                            user_id=user_id,
                            status=OrderStatus.PENDING.value,
                            total_amount=totals.total,
                            shipping_address=shipping_address,
                            delivery_method=DeliveryMethod(delivery_method).value,
                            created_at=datetime.now(timezone.utc),
                        ),
                        [
                            OrderItemModel(
                                product_id=item.product_id,
                                quantity=item.quantity,
                                price=price,
                                size=item.size,
                                color=item.color,
                            )
                            for item, price in priced
                        ],
                    )
                    self.carts.clear(user_id)
            except Exception as e:
                logger.error(f"Order conversion for user {user_id} rolled back: {e}")
                raise

        # tylko fakt przyjecia platnosci, nigdy jej tresc
        logger.info(
            f"Order {order.id} created for user {user_id}: {len(priced)} lines, "
            f"total {totals.total} (payment captured, not processed)"
        )
        return self._order_to_dict(order)

    #query
    def list_orders(self, user_id: int) -> List[Dict[str, Any]]:
        return [self._order_to_dict(o) for o in self.repo.get_orders_by_user(user_id)]

    def list_all_orders(self) -> List[Dict[str, Any]]:
        return [self._order_to_dict(o) for o in self.repo.get_all_orders()]

    def get_order(self, order_id: int, user: CurrentUser) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFound("Order not found")

        if order.user_id != user.id and not user.is_admin:
            raise Forbidden("Order belongs to another user")

        return self._order_to_dict(order)

    #admin
    def update_status(self, order_id: int, new_status: OrderStatus) -> Dict[str, Any]:
        new_status = OrderStatus(new_status)

        with self.storage.transaction():
            order = self.repo.get_order(order_id)
            if not order:
                raise NotFound("Order not found")

            current = OrderStatus(order.status)
            if new_status not in ORDER_TRANSITIONS[current]:
                raise InvalidStatusTransition(
                    f"Cannot change order status from {current.value} to {new_status.value}"
                )

            order = self.repo.update_order_status(order, new_status.value)

        logger.info(f"Order {order_id} status {current.value} -> {new_status.value}")
        return self._order_to_dict(order)

    def _order_to_dict(self, order: OrderModel) -> Dict[str, Any]:
        items = self.repo.get_order_items(order.id)
        return {
            "id": order.id,
            "user_id": order.user_id,
            "status": order.status,
            "total_amount": order.total_amount,
            "shipping_address": order.shipping_address,
            "delivery_method": order.delivery_method,
            "created_at": order.created_at,
            "items": [
                {
                    "id": i.id,
                    "order_id": i.order_id,
                    "product_id": i.product_id,
                    "quantity": i.quantity,
                    "price": i.price,
                    "size": i.size,
                    "color": i.color,
                    # produkt moze juz nie istniec, pozycja zachowuje swoje dane
                    "product": self.products.get_product(i.product_id),
                }
                for i in items
            ],
        }
