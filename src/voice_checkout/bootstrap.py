from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from voice_checkout.adapters.inbound.tool_calls import ToolCallDispatcher
from voice_checkout.adapters.outbound.dummy_payment import DummyPaymentGateway
from voice_checkout.adapters.outbound.in_memory_drafts import InMemoryDraftStore
from voice_checkout.adapters.outbound.in_memory_events import (
    FanOutEventPublisher,
    InMemoryEventBus,
)
from voice_checkout.adapters.outbound.in_memory_idempotency import (
    InMemoryIdempotencyStore,
)
from voice_checkout.adapters.outbound.in_memory_orders import InMemoryOrderRepository
from voice_checkout.adapters.outbound.log_events import LogEventPublisher
from voice_checkout.adapters.outbound.static_menu_catalog import StaticMenuCatalog
from voice_checkout.config import Settings
from voice_checkout.core.domain.model.money import Money
from voice_checkout.core.domain.model.order import now_utc
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


@dataclass(frozen=True)
class UseCases:
    checkout: CheckoutService
    cart: CartService
    handoff: HandoffService
    orders: OrderLifecycleService
    dispatcher: ToolCallDispatcher
    catalog: StaticMenuCatalog
    bus: InMemoryEventBus


def pricing_policy(settings: Settings) -> PricingPolicy:
    return PricingPolicy(
        tax_rate=settings.tax_rate,
        delivery_fee=Money.of(settings.delivery_fee),
        include_delivery_fee=settings.include_delivery_fee,
    )


def build_usecases(
    settings: Settings | None = None,
    clock: Callable[[], datetime] = now_utc,
) -> UseCases:
    settings = settings or Settings()
    policy = pricing_policy(settings)
    locks = SessionLocks()
    idle = settings.cart_idle_window

    catalog = StaticMenuCatalog()
    drafts = InMemoryDraftStore()
    orders = InMemoryOrderRepository()
    payment = DummyPaymentGateway(decline_cards=settings.payment_decline_cards)
    bus = InMemoryEventBus()
    events = FanOutEventPublisher(sinks=(LogEventPublisher(), bus))

    checkout = CheckoutService(
        CheckoutDeps(
            drafts=drafts,
            orders=orders,
            history=orders,
            catalog=catalog,
            payment=payment,
            events=events,
            policy=policy,
            clock=clock,
            idle_window=idle,
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
            idle_window=idle,
            locks=locks,
        )
    )
    handoff = HandoffService(HandoffDeps(events=events, clock=clock))
    lifecycle = OrderLifecycleService(OrderLifecycleDeps(orders=orders))
    dispatcher = ToolCallDispatcher(
        checkout=checkout,
        handoff=handoff,
        cart=cart,
        catalog=catalog,
        idempotency=InMemoryIdempotencyStore(),
        clock=clock,
    )

    return UseCases(
        checkout=checkout,
        cart=cart,
        handoff=handoff,
        orders=lifecycle,
        dispatcher=dispatcher,
        catalog=catalog,
        bus=bus,
    )
