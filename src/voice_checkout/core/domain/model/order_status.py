from __future__ import annotations

from enum import Enum

from returns.result import Failure, Result, Success

from voice_checkout.core.domain.model.errors import (
    InvalidStatusTransition,
    ValidationError,
)
from voice_checkout.core.domain.model.lookup import exhaustive


class OrderStatus(str, Enum):
    CREATING = "creating"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @staticmethod
    def parse(raw: str) -> "OrderStatus":
        text = raw.strip().lower()
        for s in OrderStatus:
            if s.value == text:
                return s
        raise ValidationError(f"invalid order status: {raw!r}")

    def can_transition_to(self, target: "OrderStatus") -> bool:
        return target in _TRANSITIONS[self]

    def transition_to(
        self, target: "OrderStatus"
    ) -> Result["OrderStatus", InvalidStatusTransition]:
        if not self.can_transition_to(target):
            return Failure(
                InvalidStatusTransition(
                    message="transition not allowed",
                    current=self.value,
                    target=target.value,
                )
            )
        return Success(target)

    def is_completed(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)

    def is_active(self) -> bool:
        return not self.is_completed()

    def can_be_cancelled(self) -> bool:
        return self in (
            OrderStatus.CREATING,
            OrderStatus.CONFIRMED,
            OrderStatus.PROCESSING,
        )

    def can_be_modified(self) -> bool:
        return self is OrderStatus.CREATING

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_S = OrderStatus

_TRANSITIONS = exhaustive(
    OrderStatus,
    {
        _S.CREATING: frozenset({_S.CONFIRMED, _S.CANCELLED}),
        _S.CONFIRMED: frozenset({_S.PROCESSING, _S.CANCELLED}),
        _S.PROCESSING: frozenset({_S.SHIPPED, _S.CANCELLED}),
        _S.SHIPPED: frozenset({_S.DELIVERED}),
        _S.DELIVERED: frozenset(),
        _S.CANCELLED: frozenset(),
    },
)

_DISPLAY_NAMES = exhaustive(
    OrderStatus,
    {
        _S.CREATING: "Creating Order",
        _S.CONFIRMED: "Order Confirmed",
        _S.PROCESSING: "Processing Order",
        _S.SHIPPED: "Order Shipped",
        _S.DELIVERED: "Order Delivered",
        _S.CANCELLED: "Order Cancelled",
    },
)
