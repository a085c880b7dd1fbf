from __future__ import annotations

from dataclasses import dataclass

import structlog
from returns.result import Failure, Result, Success

from voice_checkout.core.domain.model.errors import CheckoutError, PublishError
from voice_checkout.core.ports.outbound.events import (
    CheckoutEvent,
    EventPublisher,
    HandoffRequested,
    OrderDraftUpdated,
    OrderFinalized,
)

logger = structlog.get_logger("voice_checkout.events")


def event_fields(event: CheckoutEvent) -> dict[str, object]:
    """Flat key/value view of an event for log lines and HTTP bodies."""
    if isinstance(event, OrderDraftUpdated):
        return {
            "event": "order_draft_updated",
            "session_id": event.session_id,
            "state": event.draft.state.value,
            "missing": list(event.draft.missing),
            "timestamp": event.timestamp.isoformat(),
        }
    if isinstance(event, OrderFinalized):
        return {
            "event": "order_finalized",
            "session_id": event.session_id,
            "order_id": str(event.order.order_id.value),
            "total": str(event.order.pricing.total.amount),
            "timestamp": event.timestamp.isoformat(),
        }
    if isinstance(event, HandoffRequested):
        return {
            "event": "handoff_requested",
            "session_id": event.session_id,
            "from_role": event.from_role.value,
            "to_role": event.to_role.value,
            "reason": event.reason,
            "timestamp": event.timestamp.isoformat(),
        }
    raise TypeError(f"unsupported event: {type(event).__name__}")


@dataclass
class LogEventPublisher(EventPublisher):
    fail: bool = False

    def publish(self, event: CheckoutEvent) -> Result[None, CheckoutError]:
        if self.fail:
            return Failure(PublishError(message="publisher is down"))
        fields = event_fields(event)
        logger.info(fields.pop("event"), **fields)
        return Success(None)
