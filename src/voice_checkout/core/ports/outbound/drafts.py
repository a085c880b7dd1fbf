from __future__ import annotations

from typing import Protocol

from returns.result import Result

from voice_checkout.core.domain.model.draft import OrderDraft
from voice_checkout.core.domain.model.errors import CheckoutError


class DraftStore(Protocol):
    """
    Session-scoped key-value storage for drafts.
    Only read-your-writes within one session is required.
    """

    def get(self, session_id: str) -> Result[OrderDraft | None, CheckoutError]: ...

    def save(self, draft: OrderDraft) -> Result[None, CheckoutError]: ...

    def delete(self, session_id: str) -> Result[None, CheckoutError]: ...
