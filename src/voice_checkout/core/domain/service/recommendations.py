from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from voice_checkout.core.domain.model.cart import CartItem, CartSnapshot
from voice_checkout.core.domain.model.menu import MenuCategory
from voice_checkout.core.domain.model.money import Money


class RecommendationKind(str, Enum):
    COMPLEMENT = "COMPLEMENT"
    UPSELL = "UPSELL"
    COMBO = "COMBO"


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass(frozen=True)
class Recommendation:
    kind: RecommendationKind
    title: str
    description: str
    suggested_items: tuple[str, ...]
    reason: str
    priority: Priority


COMBO_MIN_SUBTOTAL = Money.of("15.00")


def _is(item: CartItem, category: MenuCategory, *keywords: str) -> bool:
    if item.category is not None:
        return item.category is category
    name = item.name.lower()
    return any(k in name for k in keywords)


def recommend(cart: CartSnapshot) -> tuple[Recommendation, ...]:
    """Upsell hints for the current cart. Advisory only."""
    items = cart.items
    if not items:
        return ()

    out: list[Recommendation] = []

    has_drink = any(
        _is(it, MenuCategory.BEVERAGE, "drink", "soda")
        or _is(it, MenuCategory.COMBO, "combo")
        for it in items
    )
    if not has_drink:
        out.append(
            Recommendation(
                kind=RecommendationKind.COMPLEMENT,
                title="Add a Drink",
                description="Complete your meal with a refreshing beverage",
                suggested_items=("Manzana Postobon® Drink",),
                reason="Popular combo addition",
                priority=Priority.HIGH,
            )
        )

    has_burger = any(_is(it, MenuCategory.BURGER, "burger") for it in items)
    has_side = any(_is(it, MenuCategory.SIDES, "fries") for it in items)
    if has_burger and not has_side:
        out.append(
            Recommendation(
                kind=RecommendationKind.COMPLEMENT,
                title="Add Fries",
                description="Perfect side for your burger",
                suggested_items=("Fries",),
                reason="Classic burger combo",
                priority=Priority.MEDIUM,
            )
        )

    has_dessert = any(_is(it, MenuCategory.DESSERT, "pie", "dessert") for it in items)
    if len(items) >= 2 and not has_dessert:
        out.append(
            Recommendation(
                kind=RecommendationKind.UPSELL,
                title="Try Our Apple Pie",
                description="Sweet ending to your meal",
                suggested_items=("Baked Apple Pie",),
                reason="Popular dessert choice",
                priority=Priority.LOW,
            )
        )

    if len(items) >= 3 and cart.subtotal().at_least(COMBO_MIN_SUBTOTAL):
        out.append(
            Recommendation(
                kind=RecommendationKind.COMBO,
                title="Combo Deal Available",
                description="Save money with our combo deals",
                suggested_items=("Big Burger Combo",),
                reason="Cost savings opportunity",
                priority=Priority.HIGH,
            )
        )

    return tuple(out)
