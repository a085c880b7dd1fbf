from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Sequence

import structlog
from returns.pipeline import flow
from returns.pointfree import bind, map_
from returns.result import Failure, Result, Success, safe

from voice_checkout.core.domain.model.cart import DEFAULT_IDLE_WINDOW, NewCartLine
from voice_checkout.core.domain.model.contact import (
    CustomerName,
    DeliveryAddress,
    DeliveryMethod,
    Email,
    PhoneNumber,
)
from voice_checkout.core.domain.model.draft import (
    CompletedDraft,
    Confirm,
    DraftSnapshot,
    DraftState,
    OrderDraft,
)
from voice_checkout.core.domain.model.errors import (
    CheckoutError,
    DraftNotFound,
    FieldValidationError,
    RejectedFields,
    ValidationError,
)
from voice_checkout.core.domain.model.order import ConfirmedOrder, OrderId, now_utc
from voice_checkout.core.domain.model.order_status import OrderStatus
from voice_checkout.core.domain.model.payment import (
    CardExpiry,
    CardNumber,
    Cvv,
    PaymentSummary,
)
from voice_checkout.core.domain.model.pricing import PriceBreakdown
from voice_checkout.core.domain.service.cart_service import (
    first_order_status,
    resolve_line,
)
from voice_checkout.core.domain.service.pricing import PricingPolicy, price_cart
from voice_checkout.core.domain.service.sessions import SessionDrafts, SessionLocks
from voice_checkout.core.ports.inbound.checkout import (
    CartLineInput,
    CheckoutUseCase,
    UpdateOrderDataCommand,
    UpdateOutcome,
)
from voice_checkout.core.ports.outbound.catalog import MenuCatalog
from voice_checkout.core.ports.outbound.drafts import DraftStore
from voice_checkout.core.ports.outbound.events import (
    EventPublisher,
    OrderDraftUpdated,
    OrderFinalized,
)
from voice_checkout.core.ports.outbound.orders import OrderHistory, OrderRepository
from voice_checkout.core.ports.outbound.payment import ChargeRequest, PaymentGateway

logger = structlog.get_logger(__name__)


def _lenient(parse: Callable[[str], Any]) -> Callable[[str], Result[Any, ValidationError]]:
    return safe(exceptions=(ValidationError,))(parse)


# command and draft share these attribute names
_FIELD_PARSERS: dict[str, Callable[[str], Result[Any, ValidationError]]] = {
    "name": _lenient(CustomerName.parse),
    "address": _lenient(DeliveryAddress.parse),
    "contact_phone": _lenient(PhoneNumber.parse),
    "email": _lenient(Email.parse),
    "credit_card_number": _lenient(CardNumber.parse),
    "expiration_date": _lenient(CardExpiry.parse),
    "cvv": _lenient(Cvv.parse),
    "delivery_method": _lenient(DeliveryMethod.parse),
}


@dataclass(frozen=True)
class CheckoutDeps:
    drafts: DraftStore
    orders: OrderRepository
    history: OrderHistory
    catalog: MenuCatalog
    payment: PaymentGateway
    events: EventPublisher
    policy: PricingPolicy = PricingPolicy()
    clock: Callable[[], datetime] = now_utc
    idle_window: timedelta = DEFAULT_IDLE_WINDOW
    locks: SessionLocks = field(default_factory=SessionLocks)


@dataclass(frozen=True)
class PricedDraft:
    draft: OrderDraft
    fields: CompletedDraft
    pricing: PriceBreakdown


@dataclass(frozen=True)
class Settlement:
    draft: OrderDraft
    order: ConfirmedOrder


@dataclass(frozen=True)
class CheckoutService(CheckoutUseCase):
    """
    Aggregates partial tool-call updates into a draft and finalizes it.

    Non-confirming updates only ever overwrite fields, so replaying one is
    harmless. Finalization runs once per session; afterwards every update
    returns the stored order untouched. Commands for one session are
    serialized through ``deps.locks``.

    The draft is deleted only after ``OrderFinalized`` went out, so a stored
    order whose draft still exists marks a finalization that has to be
    completed by the next update.
    """

    deps: CheckoutDeps

    @property
    def _sessions(self) -> SessionDrafts:
        return SessionDrafts(self.deps.drafts, self.deps.clock, self.deps.idle_window)

    def apply_update(
        self, command: UpdateOrderDataCommand
    ) -> Result[UpdateOutcome, CheckoutError]:
        with self.deps.locks.hold(command.session_id):
            finalized = self.deps.orders.get_by_session(command.session_id)
            if isinstance(finalized, Failure):
                return finalized
            order = finalized.unwrap()
            if order is not None:
                return self._after_finalize(order)

            return self._sessions.load_or_start(command.session_id).bind(
                lambda draft: self._merge_and_confirm(draft, command)
            )

    def get_draft(self, session_id: str) -> Result[DraftSnapshot, CheckoutError]:
        def present(draft: OrderDraft | None) -> Result[DraftSnapshot, CheckoutError]:
            if draft is None:
                return Failure(
                    DraftNotFound(message="no draft for session", session_id=session_id)
                )
            return Success(draft.snapshot())

        return self._sessions.load(session_id).bind(present)

    def abandon(self, session_id: str) -> Result[None, CheckoutError]:
        with self.deps.locks.hold(session_id):
            finalized = self.deps.orders.get_by_session(session_id)
            if isinstance(finalized, Failure):
                return finalized
            if finalized.unwrap() is not None:
                return Success(None)

            got = self.deps.drafts.get(session_id)
            if isinstance(got, Failure):
                return got
            if got.unwrap() is None:
                return Failure(
                    DraftNotFound(message="no draft for session", session_id=session_id)
                )
            logger.info("draft_abandoned", session_id=session_id)
            return self.deps.drafts.delete(session_id)

    def _after_finalize(
        self, order: ConfirmedOrder
    ) -> Result[UpdateOutcome, CheckoutError]:
        pending = self.deps.drafts.get(order.session_id)
        if isinstance(pending, Failure):
            return pending
        draft = pending.unwrap()
        if draft is None:
            logger.info(
                "update_after_finalize_ignored",
                session_id=order.session_id,
                order_id=str(order.order_id.value),
            )
            return Success(UpdateOutcome(draft=None, order=order))

        logger.info(
            "order_finalize_resumed",
            session_id=order.session_id,
            order_id=str(order.order_id.value),
        )
        return flow(
            Settlement(draft=draft, order=order),
            self._publish,
            bind(self._close_session),
            map_(_to_outcome),
        )

    # ---- merge -------------------------------------------------------------

    def _merge_and_confirm(
        self, draft: OrderDraft, command: UpdateOrderDataCommand
    ) -> Result[UpdateOutcome, CheckoutError]:
        now = self.deps.clock()
        rejected = self._merge_fields(draft, command, now)
        draft.updated_at = now
        draft.cart.last_activity = now

        saved = self.deps.drafts.save(draft).bind(
            lambda _: self.deps.events.publish(
                OrderDraftUpdated(
                    session_id=draft.session_id,
                    draft=draft.snapshot(),
                    timestamp=now,
                )
            )
        )
        if isinstance(saved, Failure):
            return saved
        logger.info(
            "draft_updated",
            session_id=draft.session_id,
            rejected=[e.field for e in rejected],
            missing=list(draft.missing_fields()),
        )

        if command.confirm is not Confirm.YES:
            return Success(UpdateOutcome(draft=draft.snapshot(), rejected=rejected))
        if rejected:
            return Failure(
                RejectedFields(
                    message="cannot confirm with rejected fields", errors=rejected
                )
            )
        completed = draft.completed()
        if isinstance(completed, Failure):
            logger.info(
                "confirm_incomplete",
                session_id=draft.session_id,
                missing=list(draft.missing_fields()),
            )
            return completed
        return self._finalize(draft, completed.unwrap())

    def _merge_fields(
        self, draft: OrderDraft, command: UpdateOrderDataCommand, now: datetime
    ) -> tuple[FieldValidationError, ...]:
        rejected: list[FieldValidationError] = []

        if command.cart is not None:
            lines = self._resolve_cart(command.cart)
            merged = lines.bind(lambda ls: draft.cart.replace_items(ls, now))
            if isinstance(merged, Failure):
                rejected.append(_field_error("cart", merged.failure()))

        for attr, parse in _FIELD_PARSERS.items():
            raw = getattr(command, attr)
            if raw is None:
                continue
            parsed = parse(raw)
            if isinstance(parsed, Failure):
                rejected.append(_field_error(attr, parsed.failure()))
            else:
                setattr(draft, attr, parsed.unwrap())

        return tuple(rejected)

    def _resolve_cart(
        self, lines: Sequence[CartLineInput]
    ) -> Result[list[NewCartLine], CheckoutError]:
        resolved: list[NewCartLine] = []
        for ln in lines:
            got = resolve_line(self.deps.catalog, ln.menu_item, ln.quantity)
            if isinstance(got, Failure):
                return got
            resolved.append(got.unwrap())
        return Success(resolved)

    # ---- finalize ----------------------------------------------------------

    def _finalize(
        self, draft: OrderDraft, fields: CompletedDraft
    ) -> Result[UpdateOutcome, CheckoutError]:
        return flow(
            self._price(draft, fields),
            bind(self._charge),
            bind(self._freeze),
            bind(self._persist),
            bind(self._publish),
            bind(self._close_session),
            map_(_to_outcome),
        )

    def _price(
        self, draft: OrderDraft, fields: CompletedDraft
    ) -> Result[PricedDraft, CheckoutError]:
        draft.state = DraftState.FINALIZING
        draft.confirm = Confirm.YES
        pricing = price_cart(
            draft.cart.snapshot(),
            first_order_status(self.deps.history, fields.email.value),
            self.deps.policy,
            method=draft.delivery_method,
        )
        return Success(PricedDraft(draft=draft, fields=fields, pricing=pricing))

    def _charge(self, priced: PricedDraft) -> Result[PricedDraft, CheckoutError]:
        f = priced.fields
        req = ChargeRequest(
            session_id=priced.draft.session_id,
            amount=priced.pricing.total.rounded(),
            card_number=f.credit_card_number,
            expiration_date=f.expiration_date,
            cvv=f.cvv,
        )
        return (
            self.deps.payment.charge(req)
            .map(lambda _: priced)
            .lash(lambda err: self._reopen(priced.draft, err))
        )

    def _reopen(
        self, draft: OrderDraft, err: CheckoutError
    ) -> Result[PricedDraft, CheckoutError]:
        draft.state = DraftState.COLLECTING
        draft.confirm = Confirm.NO
        logger.warning("payment_failed", session_id=draft.session_id, error=str(err))
        return self.deps.drafts.save(draft).bind(lambda _: Failure(err))

    def _freeze(self, priced: PricedDraft) -> Result[Settlement, CheckoutError]:
        d, f = priced.draft, priced.fields
        created = ConfirmedOrder(
            order_id=OrderId.new(),
            session_id=d.session_id,
            customer_name=f.name.value,
            delivery_address=f.address.one_line(),
            contact_phone=f.contact_phone.value,
            email=f.email.value,
            delivery_method=d.delivery_method,
            cart=d.cart.snapshot(),
            pricing=priced.pricing,
            payment=PaymentSummary(
                card_last4=f.credit_card_number.last4,
                expiration_date=str(f.expiration_date),
            ),
            status=OrderStatus.CREATING,
            confirmed_at=self.deps.clock(),
        )
        return created.transition_to(OrderStatus.CONFIRMED).map(
            lambda order: Settlement(draft=d, order=order)
        )

    def _persist(self, done: Settlement) -> Result[Settlement, CheckoutError]:
        return self.deps.orders.save(done.order).map(lambda _: done)

    def _publish(self, done: Settlement) -> Result[Settlement, CheckoutError]:
        logger.info(
            "order_finalized",
            session_id=done.order.session_id,
            order_id=str(done.order.order_id.value),
            total=str(done.order.pricing.total.amount),
        )
        return self.deps.events.publish(
            OrderFinalized(
                session_id=done.order.session_id,
                order=done.order,
                timestamp=self.deps.clock(),
            )
        ).map(lambda _: done)

    def _close_session(self, done: Settlement) -> Result[Settlement, CheckoutError]:
        done.draft.cart.deactivate(self.deps.clock())
        done.draft.state = DraftState.FINALIZED
        return self.deps.drafts.delete(done.draft.session_id).map(lambda _: done)


def _field_error(name: str, err: CheckoutError) -> FieldValidationError:
    return FieldValidationError(message=err.message, field=name)


def _to_outcome(done: Settlement) -> UpdateOutcome:
    return UpdateOutcome(draft=done.draft.snapshot(), order=done.order)
