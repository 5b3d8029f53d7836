# storefront/services/guest_cart.py
import itertools
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List

from storefront.domain.errors import InvalidVariant, NotFound
from storefront.services.cart_service import check_quantity


class CartStore(ABC):
    """
    Jeden interfejs koszyka, dwie implementacje:
    - LocalCart: koszyk goscia trzymany po stronie klienta
    - RemoteCart: koszyk zalogowanego usera przez API
    Wybiera wywolujacy (jest sesja -> RemoteCart), zasady laczenia wariantow sa te same.
    """

    @abstractmethod
    def add_item(self, product: Dict[str, Any], quantity: int, size: str, color: str) -> Dict[str, Any]: ...

    @abstractmethod
    def update_quantity(self, item_id: int, quantity: int) -> Dict[str, Any]: ...

    @abstractmethod
    def remove_item(self, item_id: int) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...

    @abstractmethod
    def list_items(self) -> List[Dict[str, Any]]: ...


class LocalCart(CartStore):
    """Koszyk goscia w pamieci klienta, bez tozsamosci po stronie serwera."""

    def __init__(self):
        self._lock = threading.Lock()
        self._items: Dict[int, Dict[str, Any]] = {}
        self._ids = itertools.count(1)

    def add_item(self, product, quantity, size, color):
        check_quantity(quantity)
        if size not in product["sizes"] or color not in product["colors"]:
            raise InvalidVariant(f"Variant {size}/{color} is not offered for product {product['id']}")

        with self._lock:
            for item in self._items.values():
                if (item["product_id"], item["size"], item["color"]) == (product["id"], size, color):
                    item["quantity"] += quantity
                    item["product"] = product
                    return dict(item)

            item = {
                "id": next(self._ids),
                "product_id": product["id"],
                "quantity": quantity,
                "size": size,
                "color": color,
                "created_at": datetime.now(timezone.utc),
                "product": product,
            }
            self._items[item["id"]] = item
            return dict(item)

    def update_quantity(self, item_id, quantity):
        check_quantity(quantity)
        with self._lock:
            item = self._items.get(item_id)
            if item is None:
                raise NotFound(f"Cart item {item_id} not found")
            item["quantity"] = quantity
            return dict(item)

    def remove_item(self, item_id):
        with self._lock:
            if self._items.pop(item_id, None) is None:
                raise NotFound(f"Cart item {item_id} not found")

    def clear(self):
        with self._lock:
            self._items.clear()

    def list_items(self):
        with self._lock:
            return [dict(i) for i in self._items.values()]

    def to_merge_payload(self) -> Dict[str, Any]:
        """Body dla POST /cart/merge przy logowaniu."""
        return {
            "items": [
                {
                    "product_id": i["product_id"],
                    "quantity": i["quantity"],
                    "size": i["size"],
                    "color": i["color"],
                }
                for i in self.list_items()
            ]
        }

