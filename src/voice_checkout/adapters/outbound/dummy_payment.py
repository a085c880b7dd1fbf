from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

import structlog
from returns.result import Failure, Result, Success

from voice_checkout.core.domain.model.errors import CheckoutError, PaymentDeclined
from voice_checkout.core.ports.outbound.payment import ChargeRequest, PaymentGateway

logger = structlog.get_logger(__name__)


@dataclass
class DummyPaymentGateway(PaymentGateway):
    decline_cards: frozenset[str] = frozenset()
    max_amount: Decimal = Decimal("10000.00")
    charges: list[ChargeRequest] = field(default_factory=list)

    def charge(self, request: ChargeRequest) -> Result[None, CheckoutError]:
        if request.card_number.value in self.decline_cards:
            return Failure(
                PaymentDeclined(message="card declined", reason="card_blacklisted")
            )
        if request.amount.amount > self.max_amount:
            return Failure(
                PaymentDeclined(message="amount too large", reason="limit_exceeded")
            )
        self.charges.append(request)
        logger.info(
            "payment_charged",
            session_id=request.session_id,
            amount=str(request.amount.amount),
            card_last4=request.card_number.last4,
        )
        return Success(None)
