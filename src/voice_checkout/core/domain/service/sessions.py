from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterator

import structlog
from returns.result import Failure, Result, Success

from voice_checkout.core.domain.model.cart import DEFAULT_IDLE_WINDOW
from voice_checkout.core.domain.model.draft import OrderDraft
from voice_checkout.core.domain.model.errors import CheckoutError
from voice_checkout.core.ports.outbound.drafts import DraftStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SessionDrafts:
    """Loads drafts and drops the ones whose cart idled past the window."""

    drafts: DraftStore
    clock: Callable[[], datetime]
    idle_window: timedelta = DEFAULT_IDLE_WINDOW

    def load(self, session_id: str) -> Result[OrderDraft | None, CheckoutError]:
        got = self.drafts.get(session_id)
        if isinstance(got, Failure):
            return got
        draft = got.unwrap()
        if draft is None:
            return Success(None)
        if draft.cart.is_expired(self.clock(), self.idle_window):
            logger.info(
                "draft_expired",
                session_id=session_id,
                last_activity=draft.cart.last_activity.isoformat(),
            )
            return self.drafts.delete(session_id).map(lambda _: None)
        return Success(draft)

    def load_or_start(self, session_id: str) -> Result[OrderDraft, CheckoutError]:
        return self.load(session_id).bind(
            lambda draft: Success(draft)
            if draft is not None
            else self._start(session_id)
        )

    def _start(self, session_id: str) -> Result[OrderDraft, CheckoutError]:
        draft = OrderDraft.start(session_id, self.clock())
        logger.info("draft_started", session_id=session_id)
        return self.drafts.save(draft).map(lambda _: draft)


class SessionLocks:
    """One lock per session id, so commands for a session run one at a time."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    @contextmanager
    def hold(self, session_id: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(session_id, threading.Lock())
        with lock:
            yield
