from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from returns.result import Result

from voice_checkout.core.domain.model.errors import CheckoutError
from voice_checkout.core.domain.model.order import ConfirmedOrder


@dataclass(frozen=True)
class GetOrderQuery:
    order_id: str  # UUID string


@dataclass(frozen=True)
class AdvanceOrderCommand:
    order_id: str
    target_status: str


class OrderLifecycleUseCase(Protocol):
    def get_order(self, query: GetOrderQuery) -> Result[ConfirmedOrder, CheckoutError]: ...

    def advance(
        self, command: AdvanceOrderCommand
    ) -> Result[ConfirmedOrder, CheckoutError]: ...
