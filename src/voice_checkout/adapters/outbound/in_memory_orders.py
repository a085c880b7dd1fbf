from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from returns.result import Failure, Result, Success

from voice_checkout.core.domain.model.errors import (
    CheckoutError,
    OrderHistoryUnavailable,
    OrderNotFound,
    PersistenceError,
)
from voice_checkout.core.domain.model.order import ConfirmedOrder, OrderId
from voice_checkout.core.ports.outbound.orders import OrderHistory, OrderRepository


@dataclass
class InMemoryOrderRepository(OrderRepository, OrderHistory):
    """
    Confirmed orders keyed by id, with a session index.

    Also answers the prior-order question by customer email. Emails in
    ``known_customers`` count as returning even without a stored order.
    """

    known_customers: set[str] = field(default_factory=set)
    history_down: bool = False
    _store: Dict[str, ConfirmedOrder] = field(default_factory=dict)
    _by_session: Dict[str, str] = field(default_factory=dict)

    def save(self, order: ConfirmedOrder) -> Result[OrderId, CheckoutError]:
        key = str(order.order_id.value)
        if key in self._store:
            return Failure(PersistenceError(message="order_id already exists"))
        if order.session_id in self._by_session:
            return Failure(PersistenceError(message="session already has an order"))
        self._store[key] = order
        self._by_session[order.session_id] = key
        return Success(order.order_id)

    def update(self, order: ConfirmedOrder) -> Result[None, CheckoutError]:
        key = str(order.order_id.value)
        if key not in self._store:
            return Failure(OrderNotFound(message="order not found", order_id=key))
        self._store[key] = order
        return Success(None)

    def get(self, order_id: OrderId) -> Result[ConfirmedOrder, CheckoutError]:
        key = str(order_id.value)
        if key not in self._store:
            return Failure(OrderNotFound(message="order not found", order_id=key))
        return Success(self._store[key])

    def get_by_session(
        self, session_id: str
    ) -> Result[ConfirmedOrder | None, CheckoutError]:
        key = self._by_session.get(session_id)
        return Success(self._store[key] if key is not None else None)

    def has_prior_order(self, customer_key: str) -> Result[bool, CheckoutError]:
        if self.history_down:
            return Failure(OrderHistoryUnavailable(message="order history is down"))
        key = customer_key.strip().lower()
        if key in self.known_customers:
            return Success(True)
        return Success(any(o.email == key for o in self._store.values()))
