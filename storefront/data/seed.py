# storefront/data/seed.py
from decimal import Decimal

from storefront.domain.enums import Category
from storefront.domain.errors import Conflict
from storefront.domain.schemas import ProductCreate, UserCreate
from storefront.repos.storage import Storage
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# maly katalog demo, pelny katalog laduje panel admina
DEMO_PRODUCTS = [
    ProductCreate(
        name="Urban Street Sneakers",
        description="Comfortable and stylish urban street sneakers perfect for everyday wear.",
        price=Decimal("89.99"),
        category=Category.MEN,
        sizes=["7", "8", "9", "10", "11", "12"],
        colors=["Black", "White", "Grey"],
        featured=True,
    ),
    ProductCreate(
        name="Elegance High Heels",
        description="Stylish high heels perfect for formal occasions and evening outings.",
        price=Decimal("129.99"),
        category=Category.WOMEN,
        sizes=["5", "6", "7", "8", "9", "10"],
        colors=["Black", "Red", "Nude"],
        featured=True,
    ),
    ProductCreate(
        name="Waterproof Rain Boots",
        description="Colorful and waterproof boots to keep little feet dry on rainy days.",
        price=Decimal("39.99"),
        category=Category.CHILDREN,
        sizes=["12C", "13C", "1Y", "2Y", "3Y", "4Y"],
        colors=["Yellow", "Pink", "Blue"],
        new_arrival=True,
    ),
    ProductCreate(
        name="Soft Sole Booties",
        description="Cozy and warm booties to keep tiny feet comfortable.",
        price=Decimal("29.99"),
        category=Category.BABY,
        sizes=["0-6M", "6-12M", "12-18M"],
        colors=["Grey", "Beige", "Pink"],
    ),
    ProductCreate(
        name="Memory Foam Slippers",
        description="Ultra-comfortable memory foam slippers for ultimate relaxation.",
        price=Decimal("39.99"),
        category=Category.SLIPPERS,
        sizes=["S", "M", "L", "XL"],
        colors=["Black", "Burgundy", "Beige"],
        new_arrival=True,
        discount_percentage=10,
    ),
]


def seed_catalog(storage: Storage) -> None:
    # not forcing: only seed if empty
    if storage.products.list_products():
        return
    service = ProductService(storage)
    for payload in DEMO_PRODUCTS:
        service.create_product(payload)
    logger.info(f"Seeded {len(DEMO_PRODUCTS)} demo products")


def seed_admin(storage: Storage, username: str) -> None:
    if storage.users.get_user_by_username(username):
        return
    try:
        UserService(storage).create_user(
            UserCreate(username=username, email=f"{username}@example.com"),
            is_admin=True,
        )
    except Conflict as e:
        logger.warning(f"Admin user not seeded: {e}")
