# storefront/repos/cart_repo.py
from abc import ABC, abstractmethod
from typing import List

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.repos.memory import MemoryTables


class CartRepository(ABC):
    @abstractmethod
    def get_item(self, item_id: int) -> CartItemModel | None: ...

    @abstractmethod
    def get_items(self, user_id: int) -> List[CartItemModel]:
        """Pozycje uzytkownika w kolejnosci dodania."""

    @abstractmethod
    def find_variant(self, user_id: int, product_id: int, size: str, color: str) -> CartItemModel | None: ...

    @abstractmethod
    def add_item(self, item: CartItemModel) -> CartItemModel: ...

    @abstractmethod
    def set_quantity(self, item: CartItemModel, quantity: int) -> CartItemModel: ...

    @abstractmethod
    def delete_item(self, item_id: int) -> bool: ...

    @abstractmethod
    def clear(self, user_id: int) -> int: ...


class MemoryCartRepo(CartRepository):
    def __init__(self, tables: MemoryTables):
        self.tables = tables

    @property
    def _rows(self):
        return self.tables.rows["cart_items"]

    def get_item(self, item_id: int) -> CartItemModel | None:
        with self.tables.lock:
            return self._rows.get(item_id)

    def get_items(self, user_id: int) -> List[CartItemModel]:
        with self.tables.lock:
            return sorted(
                (i for i in self._rows.values() if i.user_id == user_id),
                key=lambda i: i.id,
            )

    def find_variant(self, user_id, product_id, size, color):
        with self.tables.lock:
            for item in self._rows.values():
                if (item.user_id, item.product_id, item.size, item.color) == (user_id, product_id, size, color):
                    return item
            return None

    def add_item(self, item: CartItemModel) -> CartItemModel:
        return self.tables.insert("cart_items", item)

    def set_quantity(self, item: CartItemModel, quantity: int) -> CartItemModel:
        return self.tables.update(item, quantity=quantity)

    def delete_item(self, item_id: int) -> bool:
        return self.tables.delete("cart_items", item_id)

    def clear(self, user_id: int) -> int:
        with self.tables.lock:
            ids = [i.id for i in self._rows.values() if i.user_id == user_id]
            for item_id in ids:
                self.tables.delete("cart_items", item_id)
            return len(ids)


class SqlCartRepo(CartRepository):
    def __init__(self, db: Session):
        self.db = db

    def get_item(self, item_id: int) -> CartItemModel | None:
        return self.db.get(CartItemModel, item_id)

    def get_items(self, user_id: int) -> List[CartItemModel]:
        stmt = (
            select(CartItemModel)
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def find_variant(self, user_id, product_id, size, color):
        stmt = select(CartItemModel).where(
            CartItemModel.user_id == user_id,
            CartItemModel.product_id == product_id,
            CartItemModel.size == size,
            CartItemModel.color == color,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def add_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def set_quantity(self, item: CartItemModel, quantity: int) -> CartItemModel:
        item.quantity = quantity
        self.db.flush()
        return item

    def delete_item(self, item_id: int) -> bool:
        result = self.db.execute(delete(CartItemModel).where(CartItemModel.id == item_id))
        return result.rowcount > 0

    def clear(self, user_id: int) -> int:
        result = self.db.execute(delete(CartItemModel).where(CartItemModel.user_id == user_id))
        return result.rowcount
