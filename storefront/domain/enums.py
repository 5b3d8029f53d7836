# storefront/domain/enums.py
from enum import Enum


class Category(str, Enum):
    MEN = "men"
    WOMEN = "women"
    CHILDREN = "children"
    BABY = "baby"
    SLIPPERS = "slippers"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class DeliveryMethod(str, Enum):
    STANDARD = "standard"
    EXPRESS = "express"


# delivered i cancelled sa terminalne
ORDER_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}
