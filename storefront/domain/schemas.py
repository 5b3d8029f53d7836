# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Any, Dict, List
from decimal import Decimal
from datetime import datetime

from storefront.domain.enums import Category, DeliveryMethod, OrderStatus


def _non_empty_options(value: List[str] | None) -> List[str] | None:
    if value is None:
        return value
    cleaned = [v.strip() for v in value if v and v.strip()]
    if not cleaned:
        raise ValueError("must contain at least one option")
    if len(set(cleaned)) != len(cleaned):
        raise ValueError("options must be unique")
    return cleaned


# ---------------------------------------------------------------- products

class ProductCreate(BaseModel):
    """Schema dla tworzenia produktu (admin)."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    category: Category
    image_urls: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(..., min_length=1)
    colors: List[str] = Field(..., min_length=1)
    in_stock: bool = True
    featured: bool = False
    new_arrival: bool = False
    discount_percentage: int = Field(0, ge=0, le=100)

    @field_validator("sizes", "colors")
    @classmethod
    def check_options(cls, value):
        return _non_empty_options(value)


class ProductUpdate(BaseModel):
    """Schema dla czesciowej aktualizacji produktu, pola pominiete zostaja bez zmian."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    category: Category | None = None
    image_urls: List[str] | None = None
    sizes: List[str] | None = None
    colors: List[str] | None = None
    in_stock: bool | None = None
    featured: bool | None = None
    new_arrival: bool | None = None
    discount_percentage: int | None = Field(None, ge=0, le=100)

    @field_validator("sizes", "colors")
    @classmethod
    def check_options(cls, value):
        return _non_empty_options(value)


class ProductOut(BaseModel):
    id: int
    name: str
    description: str
    price: Decimal
    category: Category
    image_urls: List[str]
    sizes: List[str]
    colors: List[str]
    in_stock: bool
    featured: bool
    new_arrival: bool
    discount_percentage: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- cart

class CartItemIn(BaseModel):
    """Schema dla dodawania wariantu produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    # ilosc waliduje serwis (InvalidQuantity -> 400)
    quantity: int = 1
    size: str = Field(..., min_length=1)
    color: str = Field(..., min_length=1)


class CartQuantityIn(BaseModel):
    quantity: int


class CartLineOut(BaseModel):
    """Pozycja koszyka z aktualnymi danymi produktu (cena nie jest zamrozona)."""

    id: int
    user_id: int
    product_id: int
    quantity: int
    size: str
    color: str
    created_at: datetime
    product: ProductOut | None = None

    model_config = ConfigDict(from_attributes=True)


class CartSummaryOut(BaseModel):
    item_count: int
    subtotal: Decimal


class GuestCartIn(BaseModel):
    """Koszyk goscia przekazywany przy logowaniu."""

    items: List[CartItemIn] = Field(default_factory=list)


# ---------------------------------------------------------------- orders

class OrderCreate(BaseModel):
    """Schema dla skladania zamowienia z koszyka."""

    shipping_address: str = Field(..., min_length=1)
    # dane platnosci sa tylko przyjmowane, nigdy przetwarzane ani zapisywane
    payment: Dict[str, Any] = Field(..., min_length=1)
    delivery_method: DeliveryMethod = DeliveryMethod.STANDARD


class OrderItemOut(BaseModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: Decimal
    size: str
    color: str
    product: ProductOut | None = None

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema dla zamowienia (response)."""

    id: int
    user_id: int
    status: OrderStatus
    total_amount: Decimal
    shipping_address: str
    delivery_method: DeliveryMethod
    created_at: datetime
    items: List[OrderItemOut] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class OrderStatusIn(BaseModel):
    status: OrderStatus


# ---------------------------------------------------------------- users

class UserCreate(BaseModel):
    """Schema dla tworzenia użytkownika."""

    username: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=200, pattern=r"^[^@\s]+@[^@\s]+$")


class UserRead(BaseModel):
    """Schema dla użytkownika (response)."""

    id: int
    username: str
    email: str
    is_admin: bool

    model_config = ConfigDict(from_attributes=True)
