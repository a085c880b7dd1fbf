from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

import structlog
from returns.result import Failure, Result, Success, safe

from voice_checkout.core.domain.model.errors import CheckoutError, ValidationError
from voice_checkout.core.domain.model.order import ConfirmedOrder, OrderId
from voice_checkout.core.domain.model.order_status import OrderStatus
from voice_checkout.core.ports.inbound.orders import (
    AdvanceOrderCommand,
    GetOrderQuery,
    OrderLifecycleUseCase,
)
from voice_checkout.core.ports.outbound.orders import OrderRepository

logger = structlog.get_logger(__name__)

_parse_status = safe(exceptions=(ValidationError,))(OrderStatus.parse)


def _parse_order_id(raw: str) -> Result[OrderId, CheckoutError]:
    try:
        return Success(OrderId(UUID(raw)))
    except ValueError:
        return Failure(ValidationError(f"invalid order id: {raw!r}"))


@dataclass(frozen=True)
class OrderLifecycleDeps:
    orders: OrderRepository


@dataclass(frozen=True)
class OrderLifecycleService(OrderLifecycleUseCase):
    deps: OrderLifecycleDeps

    def get_order(self, query: GetOrderQuery) -> Result[ConfirmedOrder, CheckoutError]:
        return _parse_order_id(query.order_id).bind(self.deps.orders.get)

    def advance(
        self, command: AdvanceOrderCommand
    ) -> Result[ConfirmedOrder, CheckoutError]:
        def apply(order: ConfirmedOrder) -> Result[ConfirmedOrder, CheckoutError]:
            return _parse_status(command.target_status).bind(order.transition_to)

        def store(order: ConfirmedOrder) -> Result[ConfirmedOrder, CheckoutError]:
            logger.info(
                "order_status_changed",
                order_id=command.order_id,
                status=order.status.value,
            )
            return self.deps.orders.update(order).map(lambda _: order)

        return (
            self.get_order(GetOrderQuery(order_id=command.order_id))
            .bind(apply)
            .bind(store)
        )
