# storefront/repos/order_repo.py
from abc import ABC, abstractmethod
from typing import List, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.repos.memory import MemoryTables


class OrderRepository(ABC):
    @abstractmethod
    def create_order(self, order: OrderModel, items: Sequence[OrderItemModel]) -> OrderModel:
        """Zapisuje zamowienie i jego pozycje, ustawia order_id na pozycjach."""

    @abstractmethod
    def get_order(self, order_id: int) -> OrderModel | None: ...

    @abstractmethod
    def get_order_items(self, order_id: int) -> List[OrderItemModel]: ...

    @abstractmethod
    def get_orders_by_user(self, user_id: int) -> List[OrderModel]:
        """Najnowsze najpierw."""

    @abstractmethod
    def get_all_orders(self) -> List[OrderModel]: ...

    @abstractmethod
    def update_order_status(self, order: OrderModel, status: str) -> OrderModel: ...


def _newest_first(orders):
    return sorted(orders, key=lambda o: (o.created_at, o.id), reverse=True)


class MemoryOrderRepo(OrderRepository):
    def __init__(self, tables: MemoryTables):
        self.tables = tables

    def create_order(self, order, items):
        with self.tables.lock:
            self.tables.insert("orders", order)
            for item in items:
                item.order_id = order.id
                self.tables.insert("order_items", item)
            return order

    def get_order(self, order_id: int) -> OrderModel | None:
        with self.tables.lock:
            return self.tables.rows["orders"].get(order_id)

    def get_order_items(self, order_id: int) -> List[OrderItemModel]:
        with self.tables.lock:
            return sorted(
                (i for i in self.tables.rows["order_items"].values() if i.order_id == order_id),
                key=lambda i: i.id,
            )

    def get_orders_by_user(self, user_id: int) -> List[OrderModel]:
        with self.tables.lock:
            return _newest_first(o for o in self.tables.rows["orders"].values() if o.user_id == user_id)

    def get_all_orders(self) -> List[OrderModel]:
        with self.tables.lock:
            return _newest_first(self.tables.rows["orders"].values())

    def update_order_status(self, order, status):
        return self.tables.update(order, status=status)


class SqlOrderRepo(OrderRepository):
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order, items):
        self.db.add(order)
        self.db.flush()
        for item in items:
            item.order_id = order.id
            self.db.add(item)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_order_items(self, order_id: int) -> List[OrderItemModel]:
        stmt = (
            select(OrderItemModel)
            .where(OrderItemModel.order_id == order_id)
            .order_by(OrderItemModel.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_orders_by_user(self, user_id: int) -> List[OrderModel]:
        stmt = (
            select(OrderModel)
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_all_orders(self) -> List[OrderModel]:
        stmt = select(OrderModel).order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def update_order_status(self, order, status):
        order.status = status
        self.db.flush()
        return order
