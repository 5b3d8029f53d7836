# storefront/repos/product_repo.py
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.repos.memory import MemoryTables


class ProductRepository(ABC):
    @abstractmethod
    def get_product(self, product_id: int) -> ProductModel | None: ...

    @abstractmethod
    def list_products(
        self,
        category: str | None = None,
        featured: bool | None = None,
        new_arrival: bool | None = None,
    ) -> List[ProductModel]: ...

    @abstractmethod
    def add_product(self, product: ProductModel) -> ProductModel: ...

    @abstractmethod
    def update_product(self, product: ProductModel, changes: Dict[str, Any]) -> ProductModel: ...

    @abstractmethod
    def delete_product(self, product_id: int) -> bool: ...


def _matches(p: ProductModel, category, featured, new_arrival) -> bool:
    if category is not None and p.category != category:
        return False
    if featured is not None and bool(p.featured) != featured:
        return False
    if new_arrival is not None and bool(p.new_arrival) != new_arrival:
        return False
    return True


class MemoryProductRepo(ProductRepository):
    def __init__(self, tables: MemoryTables):
        self.tables = tables

    @property
    def _rows(self):
        return self.tables.rows["products"]

    def get_product(self, product_id: int) -> ProductModel | None:
        with self.tables.lock:
            return self._rows.get(product_id)

    def list_products(self, category=None, featured=None, new_arrival=None):
        with self.tables.lock:
            return [
                p for p in sorted(self._rows.values(), key=lambda p: p.id)
                if _matches(p, category, featured, new_arrival)
            ]

    def add_product(self, product: ProductModel) -> ProductModel:
        return self.tables.insert("products", product)

    def update_product(self, product, changes):
        return self.tables.update(product, **changes)

    def delete_product(self, product_id: int) -> bool:
        return self.tables.delete("products", product_id)


class SqlProductRepo(ProductRepository):
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def list_products(self, category=None, featured=None, new_arrival=None):
        stmt = select(ProductModel).order_by(ProductModel.id)
        if category is not None:
            stmt = stmt.where(ProductModel.category == category)
        if featured is not None:
            stmt = stmt.where(ProductModel.featured == featured)
        if new_arrival is not None:
            stmt = stmt.where(ProductModel.new_arrival == new_arrival)
        return list(self.db.execute(stmt).scalars().all())

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def update_product(self, product, changes):
        for field, value in changes.items():
            setattr(product, field, value)
        self.db.flush()
        return product

    def delete_product(self, product_id: int) -> bool:
        product = self.get_product(product_id)
        if not product:
            return False
        # bez kaskady: order_items zachowuja product_id jako wiszaca referencje
        self.db.delete(product)
        self.db.flush()
        return True
