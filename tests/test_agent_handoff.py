import pytest
from returns.result import Failure, Success

from voice_checkout.core.domain.model.agent import PROFILES, TRANSFERS, AgentRole, Capability
from voice_checkout.core.domain.model.errors import InvalidHandoff, ValidationError
from voice_checkout.core.domain.service.handoff_service import (
    can_transfer,
    capabilities_of,
    describe,
)
from voice_checkout.core.ports.inbound.handoff import HandoffCommand
from voice_checkout.core.ports.outbound.events import HandoffRequested


@pytest.mark.parametrize("role", list(AgentRole))
def test_no_role_may_transfer_to_itself(role):
    assert not can_transfer(role, role)


def test_transfer_graph():
    assert TRANSFERS[AgentRole.SALES] == {AgentRole.PAYMENT, AgentRole.SUPPORT}
    assert TRANSFERS[AgentRole.PAYMENT] == {AgentRole.SALES, AgentRole.SUPPORT}
    assert TRANSFERS[AgentRole.SUPPORT] == {AgentRole.MANAGER}
    assert TRANSFERS[AgentRole.MANAGER] == frozenset()


def test_every_role_has_a_profile():
    assert set(PROFILES) == set(AgentRole)
    assert PROFILES[AgentRole.SALES].display_name == "Sales Agent"
    caps = capabilities_of(AgentRole.PAYMENT)
    assert caps == PROFILES[AgentRole.PAYMENT].capabilities
    assert caps and all(isinstance(c, Capability) for c in caps)


def test_describe_returns_voice_settings():
    profile = describe(AgentRole.PAYMENT)
    assert profile.role is AgentRole.PAYMENT
    assert (profile.voice, profile.temperature) == ("echo", 0.3)


def test_role_parse():
    assert AgentRole.parse("  PAYMENT ") is AgentRole.PAYMENT
    with pytest.raises(ValidationError):
        AgentRole.parse("chef")


def test_allowed_handoff_publishes_event(wiring):
    result = wiring.handoff.request_handoff(
        HandoffCommand("s-1", AgentRole.SALES, AgentRole.PAYMENT, reason="cart ready")
    )

    assert isinstance(result, Success)
    event = result.unwrap()
    assert (event.from_role, event.to_role, event.reason) == (
        AgentRole.SALES,
        AgentRole.PAYMENT,
        "cart ready",
    )
    assert event.timestamp == wiring.clock()
    assert wiring.bus.published == [event]


def test_rejected_handoff_publishes_nothing(wiring):
    result = wiring.handoff.request_handoff(
        HandoffCommand("s-1", AgentRole.MANAGER, AgentRole.SALES)
    )

    assert isinstance(result, Failure)
    err = result.failure()
    assert isinstance(err, InvalidHandoff)
    assert (err.from_role, err.to_role) == ("manager", "sales")
    assert wiring.bus.of_type(HandoffRequested) == []
