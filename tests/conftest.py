from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest

from voice_checkout.adapters.inbound.tool_calls import ToolCallDispatcher
from voice_checkout.adapters.outbound.dummy_payment import DummyPaymentGateway
from voice_checkout.adapters.outbound.in_memory_drafts import InMemoryDraftStore
from voice_checkout.adapters.outbound.in_memory_events import InMemoryEventBus
from voice_checkout.adapters.outbound.in_memory_idempotency import (
    InMemoryIdempotencyStore,
)
from voice_checkout.adapters.outbound.in_memory_orders import InMemoryOrderRepository
from voice_checkout.adapters.outbound.static_menu_catalog import StaticMenuCatalog
from voice_checkout.core.domain.service.cart_service import CartDeps, CartService
from voice_checkout.core.domain.service.checkout_service import (
    CheckoutDeps,
    CheckoutService,
)
from voice_checkout.core.domain.service.handoff_service import (
    HandoffDeps,
    HandoffService,
)
from voice_checkout.core.domain.service.order_lifecycle_service import (
    OrderLifecycleDeps,
    OrderLifecycleService,
)
from voice_checkout.core.domain.service.pricing import PricingPolicy
from voice_checkout.core.domain.service.sessions import SessionLocks

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

DECLINED_CARD = "4000000000000002"


class FakeClock:
    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, minutes: int) -> None:
        self.now = self.now + timedelta(minutes=minutes)


@dataclass
class Wiring:
    clock: FakeClock
    drafts: InMemoryDraftStore
    orders: InMemoryOrderRepository
    payment: DummyPaymentGateway
    bus: InMemoryEventBus
    catalog: StaticMenuCatalog
    checkout: CheckoutService
    cart: CartService
    handoff: HandoffService
    lifecycle: OrderLifecycleService
    dispatcher: ToolCallDispatcher


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def wiring(clock: FakeClock) -> Wiring:
    drafts = InMemoryDraftStore()
    orders = InMemoryOrderRepository()
    payment = DummyPaymentGateway(decline_cards=frozenset({DECLINED_CARD}))
    bus = InMemoryEventBus()
    catalog = StaticMenuCatalog()
    policy = PricingPolicy()
    locks = SessionLocks()

    checkout = CheckoutService(
        CheckoutDeps(
            drafts=drafts,
            orders=orders,
            history=orders,
            catalog=catalog,
            payment=payment,
            events=bus,
            policy=policy,
            clock=clock,
            locks=locks,
        )
    )
    cart = CartService(
        CartDeps(
            drafts=drafts,
            orders=orders,
            history=orders,
            catalog=catalog,
            policy=policy,
            clock=clock,
            locks=locks,
        )
    )
    handoff = HandoffService(HandoffDeps(events=bus, clock=clock))
    lifecycle = OrderLifecycleService(OrderLifecycleDeps(orders=orders))
    dispatcher = ToolCallDispatcher(
        checkout=checkout,
        handoff=handoff,
        cart=cart,
        catalog=catalog,
        idempotency=InMemoryIdempotencyStore(),
        clock=clock,
    )
    return Wiring(
        clock=clock,
        drafts=drafts,
        orders=orders,
        payment=payment,
        bus=bus,
        catalog=catalog,
        checkout=checkout,
        cart=cart,
        handoff=handoff,
        lifecycle=lifecycle,
        dispatcher=dispatcher,
    )


@pytest.fixture
def declined_card() -> str:
    return DECLINED_CARD


@pytest.fixture
def full_order_args() -> dict:
    """Arguments of a complete update_order_data call, minus ``confirm``."""
    return {
        "cart": [
            {"menu_item": "Big Burger Combo", "quantity": 1},
            {"menu_item": "Fries", "quantity": 2},
        ],
        "name": "Juan Perez",
        "address": "123 Main St, Springfield, IL, 62701",
        "contact_phone": "(555) 123-4567",
        "email": "Juan.Perez@Example.com",
        "credit_card_number": "4111 1111 1111 1111",
        "expiration_date": "12/27",
        "cvv": "123",
    }
