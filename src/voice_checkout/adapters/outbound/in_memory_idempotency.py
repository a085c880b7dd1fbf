from __future__ import annotations

from dataclasses import dataclass, field

from returns.result import Failure, Result, Success

from voice_checkout.core.domain.model.errors import CheckoutError, PersistenceError
from voice_checkout.core.ports.outbound.idempotency import (
    IdempotencyRecord,
    IdempotencyStore,
)


@dataclass
class InMemoryIdempotencyStore(IdempotencyStore):
    _store: dict[tuple[str, str], IdempotencyRecord] = field(default_factory=dict)

    def get(
        self, session_id: str, call_id: str
    ) -> Result[IdempotencyRecord | None, CheckoutError]:
        return Success(self._store.get((session_id, call_id)))

    def put(
        self, session_id: str, call_id: str, record: IdempotencyRecord
    ) -> Result[None, CheckoutError]:
        k = (session_id, call_id)
        if k in self._store:
            return Failure(PersistenceError(message="call_id already recorded"))
        self._store[k] = record
        return Success(None)
