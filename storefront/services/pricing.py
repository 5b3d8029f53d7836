# storefront/services/pricing.py
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

from storefront.domain.enums import DeliveryMethod
from storefront.utils.settings import (
    EXPRESS_DELIVERY_FEE,
    FREE_SHIPPING_THRESHOLD,
    SHIPPING_FEE,
    TAX_RATE,
)

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    shipping: Decimal
    express_fee: Decimal
    tax: Decimal
    total: Decimal


def subtotal(lines: Iterable[Tuple[Decimal, int]]) -> Decimal:
    """Suma cena jednostkowa * ilosc."""
    return sum((Decimal(price) * qty for price, qty in lines), Decimal("0.00"))


def compute_totals(
    lines: Iterable[Tuple[Decimal, int]],
    delivery_method: DeliveryMethod = DeliveryMethod.STANDARD,
) -> OrderTotals:
    sub = subtotal(lines)
    # darmowa dostawa powyzej progu
    shipping = Decimal("0.00") if sub > FREE_SHIPPING_THRESHOLD else SHIPPING_FEE
    express_fee = EXPRESS_DELIVERY_FEE if delivery_method == DeliveryMethod.EXPRESS else Decimal("0.00")
    tax = sub * TAX_RATE

    return OrderTotals(
        subtotal=to_money(sub),
        shipping=to_money(shipping),
        express_fee=to_money(express_fee),
        tax=to_money(tax),
        total=to_money(sub + shipping + express_fee + tax),
    )
