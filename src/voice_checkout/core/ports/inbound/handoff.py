from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from returns.result import Result

from voice_checkout.core.domain.model.agent import AgentRole
from voice_checkout.core.domain.model.errors import CheckoutError
from voice_checkout.core.ports.outbound.events import HandoffRequested


@dataclass(frozen=True)
class HandoffCommand:
    session_id: str
    from_role: AgentRole
    to_role: AgentRole
    reason: str = ""


class HandoffUseCase(Protocol):
    def request_handoff(
        self, command: HandoffCommand
    ) -> Result[HandoffRequested, CheckoutError]: ...
