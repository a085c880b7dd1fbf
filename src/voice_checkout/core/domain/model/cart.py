from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Sequence
from uuid import UUID, uuid4

from returns.result import Failure, Result, Success

from voice_checkout.core.domain.model.errors import (
    CartInactive,
    CheckoutError,
    ValidationError,
)
from voice_checkout.core.domain.model.menu import MenuCategory
from voice_checkout.core.domain.model.money import Money, fold_money
from voice_checkout.core.domain.model.quantity import MAX_QUANTITY, Quantity

DEFAULT_IDLE_WINDOW = timedelta(minutes=30)


@dataclass(frozen=True)
class CartId:
    value: UUID

    @staticmethod
    def new() -> "CartId":
        return CartId(uuid4())


@dataclass(frozen=True)
class CartItem:
    name: str
    quantity: Quantity
    unit_price: Money
    added_at: datetime
    category: MenuCategory | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValidationError("menu item name is required")
        if self.unit_price.is_zero():
            raise ValidationError("unit price must be positive")

    def subtotal(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class CartSnapshot:
    items: tuple[CartItem, ...]

    @staticmethod
    def empty() -> "CartSnapshot":
        return CartSnapshot(items=())

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        return sum(it.quantity.value for it in self.items)

    def subtotal(self) -> Money:
        return fold_money(it.subtotal() for it in self.items)

    def names(self) -> tuple[str, ...]:
        return tuple(it.name for it in self.items)


@dataclass(frozen=True)
class NewCartLine:
    name: str
    quantity: Quantity
    unit_price: Money
    category: MenuCategory | None = None


@dataclass
class Cart:
    cart_id: CartId
    session_id: str
    created_at: datetime
    last_activity: datetime
    items: list[CartItem] = field(default_factory=list)
    active: bool = True

    @staticmethod
    def open(session_id: str, now: datetime) -> "Cart":
        return Cart(
            cart_id=CartId.new(),
            session_id=session_id,
            created_at=now,
            last_activity=now,
        )

    def add_item(
        self,
        name: str,
        quantity: Quantity,
        unit_price: Money,
        now: datetime,
        category: MenuCategory | None = None,
    ) -> Result[CartItem, CheckoutError]:
        if not self.active:
            return self._inactive()
        idx = self._index_of(name)
        if idx is None:
            item = CartItem(name, quantity, unit_price, now, category)
            self.items.append(item)
        else:
            current = self.items[idx]
            item = replace(current, quantity=current.quantity.add(quantity))
            self.items[idx] = item
        self.last_activity = now
        return Success(item)

    def update_quantity(
        self, name: str, quantity: int, now: datetime
    ) -> Result[CartItem | None, CheckoutError]:
        if not self.active:
            return self._inactive()
        if quantity <= 0:
            return self.remove_item(name, now)
        idx = self._index_of(name)
        if idx is None:
            return Failure(ValidationError(f"item not in cart: {name}"))
        if quantity > MAX_QUANTITY:
            return Failure(ValidationError(f"quantity cannot exceed {MAX_QUANTITY}"))
        item = replace(self.items[idx], quantity=Quantity(quantity))
        self.items[idx] = item
        self.last_activity = now
        return Success(item)

    def remove_item(
        self, name: str, now: datetime
    ) -> Result[CartItem | None, CheckoutError]:
        if not self.active:
            return self._inactive()
        idx = self._index_of(name)
        if idx is None:
            return Success(None)
        self.items.pop(idx)
        self.last_activity = now
        return Success(None)

    def replace_items(
        self, lines: Sequence[NewCartLine], now: datetime
    ) -> Result[CartSnapshot, CheckoutError]:
        """Swap the whole content for ``lines``; duplicate names are merged."""
        if not self.active:
            return self._inactive()
        previous = {it.name: it for it in self.items}
        merged: dict[str, CartItem] = {}
        for ln in lines:
            if ln.name in merged:
                cur = merged[ln.name]
                merged[ln.name] = replace(cur, quantity=cur.quantity.add(ln.quantity))
                continue
            kept = previous.get(ln.name)
            added_at = kept.added_at if kept is not None else now
            merged[ln.name] = CartItem(
                ln.name, ln.quantity, ln.unit_price, added_at, ln.category
            )
        self.items = list(merged.values())
        self.last_activity = now
        return Success(self.snapshot())

    def deactivate(self, now: datetime) -> None:
        self.active = False
        self.last_activity = now

    def is_expired(self, now: datetime, idle: timedelta = DEFAULT_IDLE_WINDOW) -> bool:
        return (now - self.last_activity) > idle

    def find(self, name: str) -> CartItem | None:
        idx = self._index_of(name)
        return None if idx is None else self.items[idx]

    def snapshot(self) -> CartSnapshot:
        return CartSnapshot(items=tuple(self.items))

    def _index_of(self, name: str) -> int | None:
        for i, it in enumerate(self.items):
            if it.name == name:
                return i
        return None

    def _inactive(self) -> Result:
        return Failure(
            CartInactive(message="cannot modify inactive cart", session_id=self.session_id)
        )
