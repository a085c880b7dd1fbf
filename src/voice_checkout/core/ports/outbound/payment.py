from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from returns.result import Result

from voice_checkout.core.domain.model.errors import CheckoutError
from voice_checkout.core.domain.model.money import Money
from voice_checkout.core.domain.model.payment import CardExpiry, CardNumber, Cvv


@dataclass(frozen=True)
class ChargeRequest:
    session_id: str
    amount: Money
    card_number: CardNumber
    expiration_date: CardExpiry
    cvv: Cvv


class PaymentGateway(Protocol):
    def charge(self, request: ChargeRequest) -> Result[None, CheckoutError]: ...
