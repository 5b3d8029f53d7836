# storefront/services/product_service.py
from datetime import datetime, timezone
from typing import List

from storefront.data.models.product import ProductModel
from storefront.domain.enums import Category
from storefront.domain.errors import NotFound
from storefront.domain.schemas import ProductCreate, ProductUpdate
from storefront.repos.storage import Storage
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    """
    Katalog produktow.
    Zmiany ceny sa od razu widoczne w koszykach, nigdy w zlozonych zamowieniach
    (order_items trzymaja wlasna kopie ceny).
    """

    def __init__(self, storage: Storage):
        self.storage = storage
        self.repo = storage.products

    #query
    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFound(f"Product {product_id} not found")
        return product

    def list_products(
        self,
        category: Category | None = None,
        featured: bool | None = None,
        new_arrival: bool | None = None,
    ) -> List[ProductModel]:
        return self.repo.list_products(
            category=category.value if category else None,
            featured=featured,
            new_arrival=new_arrival,
        )

    #commands (admin)
    def create_product(self, payload: ProductCreate) -> ProductModel:
        data = payload.model_dump()
        data["category"] = payload.category.value

        with self.storage.transaction():
            product = self.repo.add_product(
                ProductModel(**data, created_at=datetime.now(timezone.utc))
            )

        logger.info(f"Created product {product.id} ({product.name})")
        return product

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductModel:
        changes = payload.model_dump(exclude_unset=True)
        # null w PUT nie kasuje wymaganych pol
        changes = {k: v for k, v in changes.items() if v is not None}
        if "category" in changes:
            changes["category"] = Category(changes["category"]).value

        with self.storage.transaction():
            product = self.get_product(product_id)
            product = self.repo.update_product(product, changes)

        logger.info(f"Updated product {product_id}: {sorted(changes)}")
        return product

    def delete_product(self, product_id: int) -> None:
        with self.storage.transaction():
            if not self.repo.delete_product(product_id):
                raise NotFound(f"Product {product_id} not found")

        # order_items nie sa kasowane, product_id zostaje jako wiszaca referencja
        logger.info(f"Deleted product {product_id}")
