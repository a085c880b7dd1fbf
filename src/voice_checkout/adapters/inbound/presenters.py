from __future__ import annotations

from typing import Any

from voice_checkout.core.domain.model.cart import CartItem
from voice_checkout.core.domain.model.draft import DraftSnapshot
from voice_checkout.core.domain.model.errors import (
    CheckoutError,
    FieldValidationError,
    IncompleteOrder,
    InvalidHandoff,
    InvalidStatusTransition,
    RejectedFields,
)
from voice_checkout.core.domain.model.money import Money
from voice_checkout.core.domain.model.pricing import PriceBreakdown
from voice_checkout.core.domain.service.recommendations import Recommendation
from voice_checkout.core.ports.inbound.cart import CartSummaryView

# ---- plain-dict views shared by the tool dispatcher, HTTP and CLI -----------


def money(m: Money) -> str:
    return str(m.rounded().amount)


def item_to_dict(it: CartItem) -> dict[str, Any]:
    return {
        "menu_item": it.name,
        "quantity": it.quantity.value,
        "unit_price": money(it.unit_price),
        "subtotal": money(it.subtotal()),
        "category": it.category.value if it.category else None,
    }


def pricing_to_dict(p: PriceBreakdown) -> dict[str, Any]:
    return {
        "subtotal": money(p.subtotal),
        "tax": money(p.tax),
        "total_discount": money(p.total_discount),
        "delivery_fee": money(p.delivery_fee),
        "total": money(p.total),
        "currency": p.total.currency,
        "discounts": [
            {"type": d.kind.value, "description": d.description, "amount": money(d.amount)}
            for d in p.discounts
        ],
    }


def recommendation_to_dict(r: Recommendation) -> dict[str, Any]:
    return {
        "type": r.kind.value,
        "title": r.title,
        "description": r.description,
        "suggested_items": list(r.suggested_items),
        "priority": r.priority.value,
    }


def draft_to_dict(d: DraftSnapshot) -> dict[str, Any]:
    return {
        "session_id": d.session_id,
        "state": d.state.value,
        "confirm": d.confirm.value,
        "cart": [item_to_dict(it) for it in d.cart.items],
        "name": d.name,
        "address": d.address,
        "contact_phone": d.contact_phone,
        "email": d.email,
        "credit_card_number": d.credit_card_number,
        "expiration_date": d.expiration_date,
        "cvv": d.cvv,
        "delivery_method": d.delivery_method.value if d.delivery_method else None,
        "missing": list(d.missing),
        "updated_at": d.updated_at.isoformat(),
    }


def cart_summary_to_dict(v: CartSummaryView) -> dict[str, Any]:
    return {
        "session_id": v.session_id,
        "items": [item_to_dict(it) for it in v.items],
        "item_count": v.item_count,
        "total_quantity": v.total_quantity,
        "pricing": pricing_to_dict(v.pricing),
        "recommendations": [recommendation_to_dict(r) for r in v.recommendations],
    }


def rejected_to_list(errors: tuple[FieldValidationError, ...]) -> list[dict[str, str]]:
    return [{"field": e.field, "message": e.message} for e in errors]


def error_details(err: CheckoutError) -> dict[str, Any]:
    """Structured extras for the error kinds that carry more than a message."""
    if isinstance(err, IncompleteOrder):
        return {"missing": list(err.missing)}
    if isinstance(err, RejectedFields):
        return {"rejected": rejected_to_list(err.errors)}
    if isinstance(err, InvalidHandoff):
        return {"from_role": err.from_role, "to_role": err.to_role}
    if isinstance(err, InvalidStatusTransition):
        return {"current": err.current, "target": err.target}
    return {}
