from __future__ import annotations

from typing import Protocol

from returns.result import Result

from voice_checkout.core.domain.model.errors import CheckoutError
from voice_checkout.core.domain.model.order import ConfirmedOrder, OrderId


class OrderRepository(Protocol):
    def save(self, order: ConfirmedOrder) -> Result[OrderId, CheckoutError]: ...

    def update(self, order: ConfirmedOrder) -> Result[None, CheckoutError]: ...

    def get(self, order_id: OrderId) -> Result[ConfirmedOrder, CheckoutError]: ...

    def get_by_session(
        self, session_id: str
    ) -> Result[ConfirmedOrder | None, CheckoutError]: ...


class OrderHistory(Protocol):
    def has_prior_order(self, customer_key: str) -> Result[bool, CheckoutError]:
        """Success(False) means no record was found; a Failure means the lookup itself failed."""
        ...
