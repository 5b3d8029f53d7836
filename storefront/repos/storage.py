# storefront/repos/storage.py
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

from storefront.repos.cart_repo import CartRepository, MemoryCartRepo, SqlCartRepo
from storefront.repos.memory import MemoryTables
from storefront.repos.order_repo import OrderRepository, MemoryOrderRepo, SqlOrderRepo
from storefront.repos.product_repo import ProductRepository, MemoryProductRepo, SqlProductRepo
from storefront.repos.user_repo import UserRepository, MemoryUserRepo, SqlUserRepo


class Storage:
    """
    Zestaw repozytoriow + granica transakcji.
    Serwisy znaja tylko ten interfejs, backend (pamiec / SQL) wybiera konfiguracja.
    """

    products: ProductRepository
    carts: CartRepository
    orders: OrderRepository
    users: UserRepository

    @contextmanager
    def transaction(self) -> Iterator[None]:
        raise NotImplementedError


class MemoryStorage(Storage):
    def __init__(self, tables: MemoryTables | None = None):
        self.tables = tables or MemoryTables()
        self.products = MemoryProductRepo(self.tables)
        self.carts = MemoryCartRepo(self.tables)
        self.orders = MemoryOrderRepo(self.tables)
        self.users = MemoryUserRepo(self.tables)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self.tables.transaction():
            yield


class SqlStorage(Storage):
    def __init__(self, db: Session):
        self.db = db
        self.products = SqlProductRepo(db)
        self.carts = SqlCartRepo(db)
        self.orders = SqlOrderRepo(db)
        self.users = SqlUserRepo(db)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
