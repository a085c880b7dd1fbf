from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from returns.result import Failure, Result, Success

from voice_checkout.core.domain.model.cart import Cart, CartSnapshot
from voice_checkout.core.domain.model.contact import (
    CustomerName,
    DeliveryAddress,
    DeliveryMethod,
    Email,
    PhoneNumber,
)
from voice_checkout.core.domain.model.errors import CheckoutError, IncompleteOrder
from voice_checkout.core.domain.model.payment import CardExpiry, CardNumber, Cvv


class DraftState(str, Enum):
    COLLECTING = "collecting"
    FINALIZING = "finalizing"
    FINALIZED = "finalized"


class Confirm(str, Enum):
    NO = "no"
    YES = "yes"


REQUIRED_FIELDS: tuple[str, ...] = (
    "cart",
    "name",
    "address",
    "contact_phone",
    "email",
    "credit_card_number",
    "expiration_date",
    "cvv",
)


@dataclass
class OrderDraft:
    session_id: str
    cart: Cart
    created_at: datetime
    updated_at: datetime
    name: CustomerName | None = None
    address: DeliveryAddress | None = None
    contact_phone: PhoneNumber | None = None
    email: Email | None = None
    credit_card_number: CardNumber | None = None
    expiration_date: CardExpiry | None = None
    cvv: Cvv | None = None
    delivery_method: DeliveryMethod | None = None
    confirm: Confirm = Confirm.NO
    state: DraftState = DraftState.COLLECTING

    @staticmethod
    def start(session_id: str, now: datetime) -> "OrderDraft":
        return OrderDraft(
            session_id=session_id,
            cart=Cart.open(session_id, now),
            created_at=now,
            updated_at=now,
        )

    def missing_fields(self) -> tuple[str, ...]:
        present = {
            "cart": not self.cart.snapshot().is_empty,
            "name": self.name is not None,
            "address": self.address is not None,
            "contact_phone": self.contact_phone is not None,
            "email": self.email is not None,
            "credit_card_number": self.credit_card_number is not None,
            "expiration_date": self.expiration_date is not None,
            "cvv": self.cvv is not None,
        }
        return tuple(f for f in REQUIRED_FIELDS if not present[f])

    def is_complete(self) -> bool:
        return not self.missing_fields()

    def completed(self) -> Result[CompletedDraft, CheckoutError]:
        if (
            self.cart.snapshot().is_empty
            or self.name is None
            or self.address is None
            or self.contact_phone is None
            or self.email is None
            or self.credit_card_number is None
            or self.expiration_date is None
            or self.cvv is None
        ):
            return Failure(
                IncompleteOrder(
                    message="required fields missing", missing=self.missing_fields()
                )
            )
        return Success(
            CompletedDraft(
                name=self.name,
                address=self.address,
                contact_phone=self.contact_phone,
                email=self.email,
                credit_card_number=self.credit_card_number,
                expiration_date=self.expiration_date,
                cvv=self.cvv,
            )
        )

    def snapshot(self) -> "DraftSnapshot":
        return DraftSnapshot(
            session_id=self.session_id,
            state=self.state,
            confirm=self.confirm,
            cart=self.cart.snapshot(),
            name=self.name.value if self.name else None,
            address=self.address.one_line() if self.address else None,
            contact_phone=self.contact_phone.value if self.contact_phone else None,
            email=self.email.value if self.email else None,
            credit_card_number=(
                self.credit_card_number.masked() if self.credit_card_number else None
            ),
            expiration_date=str(self.expiration_date) if self.expiration_date else None,
            cvv=self.cvv.masked() if self.cvv else None,
            delivery_method=self.delivery_method,
            missing=self.missing_fields(),
            updated_at=self.updated_at,
        )


@dataclass(frozen=True)
class DraftSnapshot:
    """Read-only copy of a draft; card number and CVV are masked."""

    session_id: str
    state: DraftState
    confirm: Confirm
    cart: CartSnapshot
    name: str | None
    address: str | None
    contact_phone: str | None
    email: str | None
    credit_card_number: str | None
    expiration_date: str | None
    cvv: str | None
    delivery_method: DeliveryMethod | None
    missing: tuple[str, ...]
    updated_at: datetime


@dataclass(frozen=True)
class CompletedDraft:
    """Required draft fields, once every one of them is present."""

    name: CustomerName
    address: DeliveryAddress
    contact_phone: PhoneNumber
    email: Email
    credit_card_number: CardNumber
    expiration_date: CardExpiry
    cvv: Cvv
