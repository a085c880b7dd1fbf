from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from voice_checkout.core.domain.model.cart import CartSnapshot
from voice_checkout.core.domain.model.contact import DeliveryMethod
from voice_checkout.core.domain.model.money import Money, fold_money
from voice_checkout.core.domain.model.pricing import (
    Discount,
    DiscountKind,
    FirstOrderStatus,
    PriceBreakdown,
)


@dataclass(frozen=True)
class PricingPolicy:
    tax_rate: Decimal = Decimal("0.0825")
    delivery_fee: Money = Money.of("2.99")
    include_delivery_fee: bool = False

    quantity_threshold: int = 5
    quantity_rate: Decimal = Decimal("0.10")
    minimum_order: Money = Money.of("25.00")
    minimum_order_discount: Money = Money.of("2.50")
    first_order_discount: Money = Money.of("5.00")


def tax_for(subtotal: Money, policy: PricingPolicy) -> Money:
    return subtotal.scale(policy.tax_rate)


def discounts_for(
    cart: CartSnapshot, first_order: FirstOrderStatus, policy: PricingPolicy
) -> tuple[Discount, ...]:
    # every rule reads the pre-discount subtotal
    subtotal = cart.subtotal()
    found: list[Discount] = []

    if cart.total_quantity >= policy.quantity_threshold:
        found.append(
            Discount(
                kind=DiscountKind.QUANTITY,
                description=f"{policy.quantity_threshold}+ items discount",
                amount=subtotal.scale(policy.quantity_rate),
                percentage=policy.quantity_rate * 100,
            )
        )

    if not cart.is_empty and subtotal.at_least(policy.minimum_order):
        found.append(
            Discount(
                kind=DiscountKind.MINIMUM_ORDER,
                description=f"{policy.minimum_order.display()}+ order discount",
                amount=policy.minimum_order_discount,
            )
        )

    if not cart.is_empty and first_order is FirstOrderStatus.FIRST:
        found.append(
            Discount(
                kind=DiscountKind.FIRST_ORDER,
                description="First order discount",
                amount=policy.first_order_discount,
            )
        )

    return tuple(found)


def price_cart(
    cart: CartSnapshot,
    first_order: FirstOrderStatus,
    policy: PricingPolicy | None = None,
    method: DeliveryMethod | None = None,
) -> PriceBreakdown:
    """Price a cart; pickup orders carry no delivery fee."""
    policy = policy or PricingPolicy()
    subtotal = cart.subtotal()
    tax = tax_for(subtotal, policy)
    discounts = discounts_for(cart, first_order, policy)
    total_discount = fold_money(d.amount for d in discounts)
    fee = Money.zero() if method is DeliveryMethod.PICKUP else policy.delivery_fee

    # Money subtraction floors at zero
    total = (subtotal + tax) - total_discount
    if policy.include_delivery_fee and not cart.is_empty:
        total = total + fee

    return PriceBreakdown(
        subtotal=subtotal,
        tax=tax,
        total_discount=total_discount,
        total=total,
        delivery_fee=fee,
        discounts=discounts,
    )
