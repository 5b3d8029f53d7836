from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List

from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import (
    Forbidden,
    InvalidQuantity,
    InvalidVariant,
    NotFound,
    OutOfStock,
)
from storefront.domain.schemas import CartItemIn
from storefront.repos.storage import Storage
from storefront.services.lock_service import UserLockService
from storefront.services.pricing import subtotal, to_money
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def line_to_dict(item: CartItemModel, product: ProductModel | None) -> Dict[str, Any]:
    #dict przeksztalcany w jsona, produkt zawsze aktualny (cena nie jest zamrozona)
    return {
        "id": item.id,
        "user_id": item.user_id,
        "product_id": item.product_id,
        "quantity": item.quantity,
        "size": item.size,
        "color": item.color,
        "created_at": item.created_at,
        "product": product,
    }


def check_quantity(quantity: int) -> None:
    # zero nie jest poprawnym stanem, do tego sluzy remove_item
    if quantity < 1:
        raise InvalidQuantity("Quantity must be at least 1")


class CartService:
    """
    Prosta implementacja cqrs dla koszyka:
    commands (add, update, remove, clear, merge) modyfikuja stan pod lockiem usera,
    query (list, summary) tylko odczyt.

    Niezmiennik: jeden wiersz na (user, product, size, color), ponowne dodanie
    tego samego wariantu zwieksza ilosc.
    """

    def __init__(self, storage: Storage, lock_service: UserLockService):
        self.storage = storage
        self.repo = storage.carts
        self.products = storage.products
        self.lock_service = lock_service

    #query - odczyt
    def list_items(self, user_id: int) -> List[Dict[str, Any]]:
        items = self.repo.get_items(user_id)
        return [line_to_dict(i, self.products.get_product(i.product_id)) for i in items]

    def cart_summary(self, user_id: int) -> Dict[str, Any]:
        lines = self.list_items(user_id)
        priced = [(l["product"].price, l["quantity"]) for l in lines if l["product"] is not None]
        return {
            "item_count": sum(l["quantity"] for l in lines),
            "subtotal": to_money(subtotal(priced)),
        }

    #commands
    def add_item(
        self,
        user_id: int,
        product_id: int,
        quantity: int,
        size: str,
        color: str,
    ) -> Dict[str, Any]:
        with self.lock_service.hold(user_id):
            with self.storage.transaction():
                item, product = self._add(user_id, product_id, quantity, size, color)
            return line_to_dict(item, product)

    def update_quantity(self, user_id: int, item_id: int, quantity: int) -> Dict[str, Any]:
        check_quantity(quantity)

        with self.lock_service.hold(user_id):
            with self.storage.transaction():
                item = self._owned_item(user_id, item_id)
                logger.info(
                    f"Cart item {item_id} of user {user_id}: quantity "
                    f"{item.quantity} -> {quantity}"
                )
                item = self.repo.set_quantity(item, quantity)
            return line_to_dict(item, self.products.get_product(item.product_id))

    def remove_item(self, user_id: int, item_id: int) -> None:
        with self.lock_service.hold(user_id):
            with self.storage.transaction():
                self._owned_item(user_id, item_id)
                self.repo.delete_item(item_id)

        logger.info(f"Removed cart item {item_id} of user {user_id}")

    def clear_cart(self, user_id: int) -> None:
        with self.lock_service.hold(user_id):
            with self.storage.transaction():
                removed = self.repo.clear(user_id)

        logger.info(f"Cleared cart of user {user_id} ({removed} items)")

    def merge_guest_cart(self, user_id: int, lines: Iterable[CartItemIn]) -> List[Dict[str, Any]]:
        """
        Przenosi koszyk goscia (trzymany po stronie klienta) do koszyka usera.
        Te same zasady co add_item: ten sam wariant = zwiekszona ilosc.
        Najpierw walidacja wszystkich pozycji, potem zapis - albo wszystko, albo nic.
        """
        lines = list(lines)

        with self.lock_service.hold(user_id):
            for line in lines:
                self._validate(line.product_id, line.quantity, line.size, line.color)

            with self.storage.transaction():
                for line in lines:
                    self._add(user_id, line.product_id, line.quantity, line.size, line.color)

        logger.info(f"Merged {len(lines)} guest cart lines into cart of user {user_id}")
        return self.list_items(user_id)

    # ------------------------------------------------------------------ helpers

    def _validate(self, product_id: int, quantity: int, size: str, color: str) -> ProductModel:
        check_quantity(quantity)

        product = self.products.get_product(product_id)
        if not product:
            raise NotFound(f"Product {product_id} not found")

        if size not in product.sizes:
            raise InvalidVariant(f"Size {size!r} is not available for product {product_id}")
        if color not in product.colors:
            raise InvalidVariant(f"Color {color!r} is not available for product {product_id}")

        if not product.in_stock:
            raise OutOfStock(f"Product {product_id} is out of stock")

        return product

    def _add(self, user_id, product_id, quantity, size, color):
        # wywolywane pod lockiem usera i w transakcji
        product = self._validate(product_id, quantity, size, color)

        existing = self.repo.find_variant(user_id, product_id, size, color)
        if existing:
            logger.info(
                f"Variant {product_id}/{size}/{color} already in cart of user {user_id}, "
                f"quantity {existing.quantity} -> {existing.quantity + quantity}"
            )
            return self.repo.set_quantity(existing, existing.quantity + quantity), product

        logger.info(f"Adding {quantity} x {product_id}/{size}/{color} to cart of user {user_id}")
        item = self.repo.add_item(
            CartItemModel(
                user_id=user_id,
                product_id=product_id,
                quantity=quantity,
                size=size,
                color=color,
                created_at=datetime.now(timezone.utc),
            )
        )
        return item, product

    def _owned_item(self, user_id: int, item_id: int) -> CartItemModel:
        item = self.repo.get_item(item_id)
        if not item:
            raise NotFound(f"Cart item {item_id} not found")

        if item.user_id != user_id:
            logger.warning(f"User {user_id} tried to modify cart item {item_id} of another user")
            raise Forbidden("Cart item belongs to another user")

        return item

