from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Dict

from returns.result import Failure, Result, Success

from voice_checkout.core.domain.model.draft import OrderDraft
from voice_checkout.core.domain.model.errors import CheckoutError, PersistenceError
from voice_checkout.core.ports.outbound.drafts import DraftStore


@dataclass
class InMemoryDraftStore(DraftStore):
    """Copies on the way in and out so callers never share a live draft."""

    fail: bool = False
    _store: Dict[str, OrderDraft] = field(default_factory=dict)

    def get(self, session_id: str) -> Result[OrderDraft | None, CheckoutError]:
        if self.fail:
            return Failure(PersistenceError(message="draft store is down"))
        draft = self._store.get(session_id)
        return Success(copy.deepcopy(draft) if draft is not None else None)

    def save(self, draft: OrderDraft) -> Result[None, CheckoutError]:
        if self.fail:
            return Failure(PersistenceError(message="draft store is down"))
        self._store[draft.session_id] = copy.deepcopy(draft)
        return Success(None)

    def delete(self, session_id: str) -> Result[None, CheckoutError]:
        if self.fail:
            return Failure(PersistenceError(message="draft store is down"))
        self._store.pop(session_id, None)
        return Success(None)

    def __len__(self) -> int:
        return len(self._store)
