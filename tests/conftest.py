"""
Shared fixtures.

Every test gets a fresh in-memory storage and a fresh per-user lock service;
API tests bind them into the app through dependency overrides.
"""
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.api.deps import get_lock_service, get_storage
from storefront.domain.enums import Category
from storefront.domain.schemas import ProductCreate, UserCreate
from storefront.main import app
from storefront.repos.storage import MemoryStorage
from storefront.services.cart_service import CartService
from storefront.services.identity import CurrentUser
from storefront.services.lock_service import LocalUserLock
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def lock_service():
    return LocalUserLock(wait_seconds=2)


@pytest.fixture
def users(storage):
    svc = UserService(storage)
    alice = svc.create_user(UserCreate(username="alice", email="alice@example.com"))
    bob = svc.create_user(UserCreate(username="bob", email="bob@example.com"))
    admin = svc.create_user(UserCreate(username="admin", email="admin@example.com"), is_admin=True)
    return {
        "alice": CurrentUser(id=alice.id),
        "bob": CurrentUser(id=bob.id),
        "admin": CurrentUser(id=admin.id, is_admin=True),
    }


@pytest.fixture
def product_service(storage):
    return ProductService(storage)


@pytest.fixture
def sneakers(product_service):
    return product_service.create_product(
        ProductCreate(
            name="Urban Street Sneakers",
            price=Decimal("100.00"),
            category=Category.MEN,
            sizes=["9", "10", "11"],
            colors=["Black", "White"],
        )
    )


@pytest.fixture
def slippers(product_service):
    return product_service.create_product(
        ProductCreate(
            name="Cozy Home Slippers",
            price=Decimal("20.00"),
            category=Category.SLIPPERS,
            sizes=["S", "M", "L"],
            colors=["Grey"],
            featured=True,
        )
    )


@pytest.fixture
def cart_service(storage, lock_service):
    return CartService(storage=storage, lock_service=lock_service)


@pytest.fixture
def order_service(storage, lock_service):
    return OrderService(storage=storage, lock_service=lock_service)


@pytest.fixture
def test_client(storage, lock_service):
    """TestClient bound to the per-test storage."""
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_lock_service] = lambda: lock_service

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()
