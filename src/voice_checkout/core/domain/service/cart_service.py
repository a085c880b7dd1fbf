from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable

import structlog
from returns.result import Failure, Result, Success, safe

from voice_checkout.core.domain.model.cart import (
    DEFAULT_IDLE_WINDOW,
    CartSnapshot,
    NewCartLine,
)
from voice_checkout.core.domain.model.draft import OrderDraft
from voice_checkout.core.domain.model.errors import (
    CartInactive,
    CartNotFound,
    CheckoutError,
    ValidationError,
)
from voice_checkout.core.domain.model.order import ConfirmedOrder, now_utc
from voice_checkout.core.domain.model.pricing import FirstOrderStatus
from voice_checkout.core.domain.model.quantity import Quantity
from voice_checkout.core.domain.service.pricing import PricingPolicy, price_cart
from voice_checkout.core.domain.service.recommendations import recommend
from voice_checkout.core.domain.service.sessions import SessionDrafts, SessionLocks
from voice_checkout.core.ports.inbound.cart import (
    AddItemCommand,
    CartSummaryView,
    CartUseCase,
    RemoveItemCommand,
    UpdateItemQuantityCommand,
)
from voice_checkout.core.ports.outbound.catalog import MenuCatalog
from voice_checkout.core.ports.outbound.drafts import DraftStore
from voice_checkout.core.ports.outbound.orders import OrderHistory, OrderRepository

logger = structlog.get_logger(__name__)

_parse_quantity = safe(exceptions=(ValidationError,))(Quantity.parse)


def resolve_line(
    catalog: MenuCatalog, menu_item: str, quantity: int | str
) -> Result[NewCartLine, CheckoutError]:
    """Price a requested line from the catalog; the core never invents prices."""

    def to_line(entry) -> Result[NewCartLine, CheckoutError]:
        if not entry.available:
            return Failure(ValidationError(f"menu item unavailable: {entry.name}"))
        return _parse_quantity(quantity).map(
            lambda q: NewCartLine(entry.name, q, entry.unit_price, entry.category)
        )

    return catalog.lookup(menu_item).bind(to_line)


def first_order_status(history: OrderHistory, customer_key: str | None) -> FirstOrderStatus:
    if customer_key is None:
        return FirstOrderStatus.UNKNOWN
    found = history.has_prior_order(customer_key)
    if isinstance(found, Failure):
        logger.warning(
            "first_order_lookup_failed",
            customer_key=customer_key,
            error=str(found.failure()),
        )
        return FirstOrderStatus.UNKNOWN
    return FirstOrderStatus.RETURNING if found.unwrap() else FirstOrderStatus.FIRST


@dataclass(frozen=True)
class CartDeps:
    drafts: DraftStore
    orders: OrderRepository
    history: OrderHistory
    catalog: MenuCatalog
    policy: PricingPolicy = PricingPolicy()
    clock: Callable[[], datetime] = now_utc
    idle_window: timedelta = DEFAULT_IDLE_WINDOW
    locks: SessionLocks = field(default_factory=SessionLocks)


@dataclass(frozen=True)
class CartService(CartUseCase):
    deps: CartDeps

    @property
    def _sessions(self) -> SessionDrafts:
        return SessionDrafts(self.deps.drafts, self.deps.clock, self.deps.idle_window)

    def add_item(self, command: AddItemCommand) -> Result[CartSummaryView, CheckoutError]:
        def add(draft: OrderDraft) -> Result[OrderDraft, CheckoutError]:
            return resolve_line(
                self.deps.catalog, command.menu_item, command.quantity
            ).bind(
                lambda ln: draft.cart.add_item(
                    ln.name, ln.quantity, ln.unit_price, self.deps.clock(), ln.category
                )
            ).map(lambda _: draft)

        return self._mutate(command.session_id, add, create=True)

    def update_quantity(
        self, command: UpdateItemQuantityCommand
    ) -> Result[CartSummaryView, CheckoutError]:
        def update(draft: OrderDraft) -> Result[OrderDraft, CheckoutError]:
            return draft.cart.update_quantity(
                self._canonical(command.menu_item), command.quantity, self.deps.clock()
            ).map(lambda _: draft)

        return self._mutate(command.session_id, update, create=False)

    def remove_item(
        self, command: RemoveItemCommand
    ) -> Result[CartSummaryView, CheckoutError]:
        def remove(draft: OrderDraft) -> Result[OrderDraft, CheckoutError]:
            return draft.cart.remove_item(
                self._canonical(command.menu_item), self.deps.clock()
            ).map(lambda _: draft)

        return self._mutate(command.session_id, remove, create=False)

    def get_summary(self, session_id: str) -> Result[CartSummaryView, CheckoutError]:
        finalized = self.deps.orders.get_by_session(session_id)
        if isinstance(finalized, Failure):
            return finalized
        order = finalized.unwrap()
        if order is not None:
            return Success(_summary_from_order(order))

        loaded = self._sessions.load(session_id)
        if isinstance(loaded, Failure):
            return loaded
        draft = loaded.unwrap()
        if draft is None:
            return Failure(CartNotFound(message="no cart for session", session_id=session_id))
        return Success(self._summary(draft))

    # ---- helpers -----------------------------------------------------------

    def _canonical(self, menu_item: str) -> str:
        # cart lines carry the catalog spelling
        return self.deps.catalog.lookup(menu_item).map(lambda e: e.name).value_or(menu_item)

    def _mutate(
        self,
        session_id: str,
        op: Callable[[OrderDraft], Result[OrderDraft, CheckoutError]],
        create: bool,
    ) -> Result[CartSummaryView, CheckoutError]:
        with self.deps.locks.hold(session_id):
            finalized = self.deps.orders.get_by_session(session_id)
            if isinstance(finalized, Failure):
                return finalized
            if finalized.unwrap() is not None:
                return Failure(
                    CartInactive(message="order already finalized", session_id=session_id)
                )

            loaded = (
                self._sessions.load_or_start(session_id)
                if create
                else self._sessions.load(session_id)
            )
            if isinstance(loaded, Failure):
                return loaded
            draft = loaded.unwrap()
            if draft is None:
                return Failure(
                    CartNotFound(message="no cart for session", session_id=session_id)
                )

            return (
                op(draft)
                .bind(self._touch_and_save)
                .map(self._summary)
            )

    def _touch_and_save(self, draft: OrderDraft) -> Result[OrderDraft, CheckoutError]:
        draft.updated_at = self.deps.clock()
        logger.info(
            "cart_updated",
            session_id=draft.session_id,
            items=len(draft.cart.items),
        )
        return self.deps.drafts.save(draft).map(lambda _: draft)

    def _summary(self, draft: OrderDraft) -> CartSummaryView:
        snap = draft.cart.snapshot()
        customer_key = draft.email.value if draft.email else None
        pricing = price_cart(
            snap,
            first_order_status(self.deps.history, customer_key),
            self.deps.policy,
            method=draft.delivery_method,
        )
        return CartSummaryView(
            session_id=draft.session_id,
            items=snap.items,
            item_count=snap.item_count,
            total_quantity=snap.total_quantity,
            pricing=pricing,
            recommendations=recommend(snap),
        )


def _summary_from_order(order: ConfirmedOrder) -> CartSummaryView:
    snap: CartSnapshot = order.cart
    return CartSummaryView(
        session_id=order.session_id,
        items=snap.items,
        item_count=snap.item_count,
        total_quantity=snap.total_quantity,
        pricing=order.pricing,
        recommendations=(),
    )
