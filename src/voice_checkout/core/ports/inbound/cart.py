from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from returns.result import Result

from voice_checkout.core.domain.model.cart import CartItem
from voice_checkout.core.domain.model.errors import CheckoutError
from voice_checkout.core.domain.model.pricing import PriceBreakdown
from voice_checkout.core.domain.service.recommendations import Recommendation


@dataclass(frozen=True)
class AddItemCommand:
    session_id: str
    menu_item: str
    quantity: int = 1


@dataclass(frozen=True)
class UpdateItemQuantityCommand:
    session_id: str
    menu_item: str
    quantity: int


@dataclass(frozen=True)
class RemoveItemCommand:
    session_id: str
    menu_item: str


@dataclass(frozen=True)
class CartSummaryView:
    session_id: str
    items: tuple[CartItem, ...]
    item_count: int
    total_quantity: int
    pricing: PriceBreakdown
    recommendations: tuple[Recommendation, ...]


class CartUseCase(Protocol):
    def add_item(self, command: AddItemCommand) -> Result[CartSummaryView, CheckoutError]: ...

    def update_quantity(
        self, command: UpdateItemQuantityCommand
    ) -> Result[CartSummaryView, CheckoutError]: ...

    def remove_item(
        self, command: RemoveItemCommand
    ) -> Result[CartSummaryView, CheckoutError]: ...

    def get_summary(self, session_id: str) -> Result[CartSummaryView, CheckoutError]: ...
