from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

import structlog
from returns.result import Failure, Result

from voice_checkout.core.domain.model.agent import (
    PROFILES,
    TRANSFERS,
    AgentProfile,
    AgentRole,
    Capability,
)
from voice_checkout.core.domain.model.errors import CheckoutError, InvalidHandoff
from voice_checkout.core.domain.model.order import now_utc
from voice_checkout.core.ports.inbound.handoff import HandoffCommand, HandoffUseCase
from voice_checkout.core.ports.outbound.events import EventPublisher, HandoffRequested

logger = structlog.get_logger(__name__)


def capabilities_of(role: AgentRole) -> frozenset[Capability]:
    return PROFILES[role].capabilities


def describe(role: AgentRole) -> AgentProfile:
    return PROFILES[role]


def can_transfer(from_role: AgentRole, to_role: AgentRole) -> bool:
    return to_role in TRANSFERS[from_role]


@dataclass(frozen=True)
class HandoffDeps:
    events: EventPublisher
    clock: Callable[[], datetime] = now_utc


@dataclass(frozen=True)
class HandoffService(HandoffUseCase):
    """Stateless gate for role switches; the caller owns the current role."""

    deps: HandoffDeps

    def request_handoff(
        self, command: HandoffCommand
    ) -> Result[HandoffRequested, CheckoutError]:
        if not can_transfer(command.from_role, command.to_role):
            logger.info(
                "handoff_rejected",
                session_id=command.session_id,
                from_role=command.from_role.value,
                to_role=command.to_role.value,
            )
            return Failure(
                InvalidHandoff(
                    message=(
                        f"cannot transfer from {PROFILES[command.from_role].display_name}"
                        f" to {PROFILES[command.to_role].display_name}"
                    ),
                    from_role=command.from_role.value,
                    to_role=command.to_role.value,
                )
            )

        event = HandoffRequested(
            session_id=command.session_id,
            from_role=command.from_role,
            to_role=command.to_role,
            reason=command.reason,
            timestamp=self.deps.clock(),
        )
        logger.info(
            "handoff_requested",
            session_id=command.session_id,
            from_role=command.from_role.value,
            to_role=command.to_role.value,
        )
        return self.deps.events.publish(event).map(lambda _: event)
