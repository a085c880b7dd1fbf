from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from voice_checkout.core.domain.model.money import Money


class DiscountKind(str, Enum):
    QUANTITY = "QUANTITY_DISCOUNT"
    MINIMUM_ORDER = "MINIMUM_ORDER"
    FIRST_ORDER = "FIRST_ORDER"


class FirstOrderStatus(str, Enum):
    """Answer of the prior-order lookup; only FIRST grants the discount."""

    FIRST = "first"
    RETURNING = "returning"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Discount:
    kind: DiscountKind
    description: str
    amount: Money
    percentage: Decimal = Decimal("0")


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Money
    tax: Money
    total_discount: Money
    total: Money
    delivery_fee: Money
    discounts: tuple[Discount, ...] = ()

    def discount_for(self, kind: DiscountKind) -> Money:
        for d in self.discounts:
            if d.kind is kind:
                return d.amount
        return Money.zero(self.subtotal.currency)
