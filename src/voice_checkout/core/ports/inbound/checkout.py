from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from returns.result import Result

from voice_checkout.core.domain.model.draft import Confirm, DraftSnapshot
from voice_checkout.core.domain.model.errors import CheckoutError, FieldValidationError
from voice_checkout.core.domain.model.order import ConfirmedOrder


@dataclass(frozen=True)
class CartLineInput:
    menu_item: str
    quantity: int


@dataclass(frozen=True)
class UpdateOrderDataCommand:
    """Partial update; ``None`` means the field was not sent."""

    session_id: str
    confirm: Confirm
    cart: Sequence[CartLineInput] | None = None
    name: str | None = None
    address: str | None = None
    contact_phone: str | None = None
    email: str | None = None
    credit_card_number: str | None = None
    expiration_date: str | None = None
    cvv: str | None = None
    delivery_method: str | None = None


@dataclass(frozen=True)
class UpdateOutcome:
    draft: DraftSnapshot | None
    rejected: tuple[FieldValidationError, ...] = ()
    order: ConfirmedOrder | None = None

    @property
    def finalized(self) -> bool:
        return self.order is not None


class CheckoutUseCase(Protocol):
    def apply_update(
        self, command: UpdateOrderDataCommand
    ) -> Result[UpdateOutcome, CheckoutError]: ...

    def get_draft(self, session_id: str) -> Result[DraftSnapshot, CheckoutError]: ...

    def abandon(self, session_id: str) -> Result[None, CheckoutError]: ...
