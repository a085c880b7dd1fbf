from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from voice_checkout.core.domain.model.money import Money


class MenuCategory(str, Enum):
    BURGER = "burger"
    SANDWICH = "sandwich"
    SIDES = "sides"
    DESSERT = "dessert"
    BEVERAGE = "beverage"
    COMBO = "combo"


@dataclass(frozen=True)
class MenuEntry:
    name: str
    category: MenuCategory
    unit_price: Money
    available: bool = True
