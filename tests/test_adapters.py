import io
import json

from returns.result import Failure, Success

from voice_checkout.adapters.inbound.cli import run_cli
from voice_checkout.adapters.outbound.in_memory_events import (
    FanOutEventPublisher,
    InMemoryEventBus,
)
from voice_checkout.adapters.outbound.log_events import LogEventPublisher, event_fields
from voice_checkout.adapters.outbound.static_menu_catalog import DEMO_MENU, StaticMenuCatalog
from voice_checkout.core.domain.model.agent import AgentRole
from voice_checkout.core.domain.model.errors import PublishError, ValidationError
from voice_checkout.core.domain.model.menu import MenuCategory, MenuEntry
from voice_checkout.core.domain.model.money import Money
from voice_checkout.core.domain.service.cart_service import resolve_line
from voice_checkout.core.ports.outbound.events import HandoffRequested


def _event(clock):
    return HandoffRequested("s-1", AgentRole.SALES, AgentRole.PAYMENT, "ready", clock())


def test_catalog_lookup_is_case_and_space_insensitive():
    catalog = StaticMenuCatalog()

    assert catalog.lookup("  big   burger COMBO ").unwrap().name == "Big Burger Combo"
    assert isinstance(catalog.lookup("Pizza").failure(), ValidationError)
    assert len(catalog.entries()) == len(DEMO_MENU) == 10


def test_unavailable_item_cannot_be_added():
    catalog = StaticMenuCatalog(
        menu=(MenuEntry("Fries", MenuCategory.SIDES, Money.of("3.19"), available=False),)
    )

    assert isinstance(resolve_line(catalog, "Fries", 1).failure(), ValidationError)


def test_bus_notifies_subscribers_in_order(clock):
    bus = InMemoryEventBus()
    seen = []
    bus.subscribe(seen.append)

    event = _event(clock)
    assert bus.publish(event) == Success(None)
    assert seen == [event]
    assert bus.of_type(HandoffRequested) == [event]


def test_fan_out_stops_at_first_failing_sink(clock):
    first, last = InMemoryEventBus(), InMemoryEventBus()
    publisher = FanOutEventPublisher(sinks=(first, LogEventPublisher(fail=True), last))

    result = publisher.publish(_event(clock))

    assert isinstance(result, Failure)
    assert isinstance(result.failure(), PublishError)
    assert len(first.published) == 1
    assert last.published == []


def test_event_fields_are_flat(clock):
    fields = event_fields(_event(clock))

    assert fields["event"] == "handoff_requested"
    assert fields["to_role"] == "payment"
    json.dumps(fields)


def test_cli_prints_tool_result(wiring):
    out = io.StringIO()

    code = run_cli(
        wiring.dispatcher,
        "s-1",
        "update_order_data",
        '{"cart":[{"menu_item":"Fries","quantity":2}],"confirm":"no"}',
        out=out,
    )

    assert code == 0
    text = out.getvalue()
    assert text.startswith("[ok]")
    assert '"Fries"' in text


def test_cli_rejects_non_object_input(wiring):
    out = io.StringIO()

    assert run_cli(wiring.dispatcher, "s-1", "update_order_data", "[1, 2]", out=out) == 2
    assert out.getvalue().startswith("invalid_input")


def test_cli_reports_tool_failure(wiring):
    out = io.StringIO()

    code = run_cli(wiring.dispatcher, "s-1", "update_order_data", '{"confirm":"yes"}', out=out)

    assert code == 1
    assert out.getvalue().startswith("[ng]")
