from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, Union

from returns.result import Result

from voice_checkout.core.domain.model.agent import AgentRole
from voice_checkout.core.domain.model.draft import DraftSnapshot
from voice_checkout.core.domain.model.errors import CheckoutError
from voice_checkout.core.domain.model.order import ConfirmedOrder


@dataclass(frozen=True)
class OrderDraftUpdated:
    session_id: str
    draft: DraftSnapshot
    timestamp: datetime


@dataclass(frozen=True)
class OrderFinalized:
    session_id: str
    order: ConfirmedOrder
    timestamp: datetime


@dataclass(frozen=True)
class HandoffRequested:
    session_id: str
    from_role: AgentRole
    to_role: AgentRole
    reason: str
    timestamp: datetime


CheckoutEvent = Union[OrderDraftUpdated, OrderFinalized, HandoffRequested]


class EventPublisher(Protocol):
    def publish(self, event: CheckoutEvent) -> Result[None, CheckoutError]: ...
