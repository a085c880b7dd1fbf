from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from returns.result import Result

from voice_checkout.core.domain.model.cart import CartItem, CartSnapshot
from voice_checkout.core.domain.model.contact import DeliveryMethod
from voice_checkout.core.domain.model.errors import InvalidStatusTransition
from voice_checkout.core.domain.model.menu import MenuCategory
from voice_checkout.core.domain.model.money import Money
from voice_checkout.core.domain.model.order_status import OrderStatus
from voice_checkout.core.domain.model.payment import PaymentSummary
from voice_checkout.core.domain.model.pricing import (
    Discount,
    DiscountKind,
    PriceBreakdown,
)
from voice_checkout.core.domain.model.quantity import Quantity


@dataclass(frozen=True)
class OrderId:
    value: UUID

    @staticmethod
    def new() -> "OrderId":
        return OrderId(uuid4())


@dataclass(frozen=True)
class ConfirmedOrder:
    order_id: OrderId
    session_id: str
    customer_name: str
    delivery_address: str
    contact_phone: str
    email: str
    delivery_method: DeliveryMethod | None
    cart: CartSnapshot
    pricing: PriceBreakdown
    payment: PaymentSummary
    status: OrderStatus
    confirmed_at: datetime

    def transition_to(
        self, target: OrderStatus
    ) -> Result["ConfirmedOrder", InvalidStatusTransition]:
        return self.status.transition_to(target).map(
            lambda s: replace(self, status=s)
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "order_id": str(self.order_id.value),
            "session_id": self.session_id,
            "customer_name": self.customer_name,
            "delivery_address": self.delivery_address,
            "contact_phone": self.contact_phone,
            "email": self.email,
            "delivery_method": (
                self.delivery_method.value if self.delivery_method else None
            ),
            "cart": [_item_to_dict(it) for it in self.cart.items],
            "pricing": _pricing_to_dict(self.pricing),
            "payment": {
                "card_last4": self.payment.card_last4,
                "expiration_date": self.payment.expiration_date,
            },
            "status": self.status.value,
            "confirmed_at": self.confirmed_at.isoformat(),
        }

    @staticmethod
    def from_dict(obj: dict[str, Any]) -> "ConfirmedOrder":
        method = obj.get("delivery_method")
        return ConfirmedOrder(
            order_id=OrderId(UUID(obj["order_id"])),
            session_id=obj["session_id"],
            customer_name=obj["customer_name"],
            delivery_address=obj["delivery_address"],
            contact_phone=obj["contact_phone"],
            email=obj["email"],
            delivery_method=DeliveryMethod(method) if method else None,
            cart=CartSnapshot(items=tuple(_item_from_dict(x) for x in obj["cart"])),
            pricing=_pricing_from_dict(obj["pricing"]),
            payment=PaymentSummary(
                card_last4=obj["payment"]["card_last4"],
                expiration_date=obj["payment"]["expiration_date"],
            ),
            status=OrderStatus(obj["status"]),
            confirmed_at=datetime.fromisoformat(obj["confirmed_at"]),
        )


# ---- serialization helpers -------------------------------------------------
# amounts travel as strings so Decimal precision survives the round-trip


def _money(m: Money) -> str:
    return str(m.amount)


def _item_to_dict(it: CartItem) -> dict[str, Any]:
    return {
        "name": it.name,
        "quantity": it.quantity.value,
        "unit_price": _money(it.unit_price),
        "added_at": it.added_at.isoformat(),
        "category": it.category.value if it.category else None,
    }


def _item_from_dict(obj: dict[str, Any]) -> CartItem:
    category = obj.get("category")
    return CartItem(
        name=obj["name"],
        quantity=Quantity(int(obj["quantity"])),
        unit_price=Money(Decimal(obj["unit_price"])),
        added_at=datetime.fromisoformat(obj["added_at"]),
        category=MenuCategory(category) if category else None,
    )


def _pricing_to_dict(p: PriceBreakdown) -> dict[str, Any]:
    return {
        "subtotal": _money(p.subtotal),
        "tax": _money(p.tax),
        "total_discount": _money(p.total_discount),
        "total": _money(p.total),
        "delivery_fee": _money(p.delivery_fee),
        "currency": p.total.currency,
        "discounts": [
            {
                "type": d.kind.value,
                "description": d.description,
                "amount": _money(d.amount),
                "percentage": str(d.percentage),
            }
            for d in p.discounts
        ],
    }


def _pricing_from_dict(obj: dict[str, Any]) -> PriceBreakdown:
    currency = obj.get("currency", "USD")

    def m(key: str) -> Money:
        return Money(Decimal(obj[key]), currency)

    return PriceBreakdown(
        subtotal=m("subtotal"),
        tax=m("tax"),
        total_discount=m("total_discount"),
        total=m("total"),
        delivery_fee=m("delivery_fee"),
        discounts=tuple(
            Discount(
                kind=DiscountKind(d["type"]),
                description=d["description"],
                amount=Money(Decimal(d["amount"]), currency),
                percentage=Decimal(d["percentage"]),
            )
            for d in obj.get("discounts", [])
        ),
    )


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
