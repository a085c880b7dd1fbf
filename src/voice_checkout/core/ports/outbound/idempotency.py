from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from returns.result import Result

from voice_checkout.core.domain.model.errors import CheckoutError


@dataclass(frozen=True)
class IdempotencyRecord:
    request_hash: str
    response_json: str
    recorded_at: datetime


class IdempotencyStore(Protocol):
    """Replay cache for tool calls, keyed by (session_id, call_id)."""

    def get(
        self, session_id: str, call_id: str
    ) -> Result[IdempotencyRecord | None, CheckoutError]: ...

    def put(
        self, session_id: str, call_id: str, record: IdempotencyRecord
    ) -> Result[None, CheckoutError]: ...
