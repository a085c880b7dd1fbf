from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from returns.result import Failure, Result, Success

from voice_checkout.core.domain.model.errors import CheckoutError, ValidationError
from voice_checkout.core.domain.model.menu import MenuCategory, MenuEntry
from voice_checkout.core.domain.model.money import unit_price
from voice_checkout.core.ports.outbound.catalog import MenuCatalog

_C = MenuCategory

DEMO_MENU: tuple[MenuEntry, ...] = (
    MenuEntry("Big Burger Combo", _C.COMBO, unit_price("14.89")),
    MenuEntry("Double Cheeseburger", _C.BURGER, unit_price("5.79")),
    MenuEntry("Cheeseburger", _C.BURGER, unit_price("3.49")),
    MenuEntry("Hamburger", _C.BURGER, unit_price("2.99")),
    MenuEntry("Crispy Chicken Sandwich", _C.SANDWICH, unit_price("4.99")),
    MenuEntry("Chicken Nuggets (6 pc)", _C.SIDES, unit_price("4.49")),
    MenuEntry("Crispy Fish Sandwich", _C.SANDWICH, unit_price("5.29")),
    MenuEntry("Fries", _C.SIDES, unit_price("3.19")),
    MenuEntry("Baked Apple Pie", _C.DESSERT, unit_price("1.79")),
    MenuEntry("Manzana Postobon® Drink", _C.BEVERAGE, unit_price("1.49")),
)


def _key(name: str) -> str:
    return " ".join(name.split()).casefold()


@dataclass
class StaticMenuCatalog(MenuCatalog):
    """Case-insensitive lookup over a fixed menu."""

    menu: Sequence[MenuEntry] = DEMO_MENU
    _index: dict[str, MenuEntry] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._index = {_key(e.name): e for e in self.menu}
        if len(self._index) != len(self.menu):
            raise ValueError("menu contains duplicate item names")

    def lookup(self, name: str) -> Result[MenuEntry, CheckoutError]:
        entry = self._index.get(_key(name))
        if entry is None:
            return Failure(ValidationError(f"unknown menu item: {name!r}"))
        return Success(entry)

    def entries(self) -> Sequence[MenuEntry]:
        return tuple(self.menu)
