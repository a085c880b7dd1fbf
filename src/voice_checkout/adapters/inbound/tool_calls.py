from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Literal, Mapping

import pydantic
import structlog
from pydantic import BaseModel, ConfigDict, Field
from returns.result import Failure, Result, Success

from voice_checkout.adapters.inbound.presenters import (
    cart_summary_to_dict,
    draft_to_dict,
    error_details,
    rejected_to_list,
)
from voice_checkout.core.domain.model.agent import AgentRole
from voice_checkout.core.domain.model.draft import Confirm
from voice_checkout.core.domain.model.errors import (
    CheckoutError,
    IdempotencyKeyConflict,
    PersistenceError,
    PublishError,
)
from voice_checkout.core.domain.model.order import now_utc
from voice_checkout.core.domain.service.handoff_service import describe
from voice_checkout.core.ports.inbound.cart import CartUseCase
from voice_checkout.core.ports.inbound.checkout import (
    CartLineInput,
    CheckoutUseCase,
    UpdateOrderDataCommand,
    UpdateOutcome,
)
from voice_checkout.core.ports.inbound.handoff import HandoffCommand, HandoffUseCase
from voice_checkout.core.ports.outbound.catalog import MenuCatalog
from voice_checkout.core.ports.outbound.events import HandoffRequested
from voice_checkout.core.ports.outbound.idempotency import (
    IdempotencyRecord,
    IdempotencyStore,
)

logger = structlog.get_logger(__name__)

# ---- tool argument DTOs ----------------------------------------------------


class _Args(BaseModel):
    # voice models send numbers for phone / cvv fields
    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)


class CartLineArgs(_Args):
    menu_item: str = Field(min_length=1, description="Name of the menu item")
    quantity: int = Field(description="Number of units")


class UpdateOrderDataArgs(_Args):
    cart: list[CartLineArgs] | None = Field(
        None, description="Full list of menu items and quantities in the cart"
    )
    name: str | None = Field(None, description="Customer full name")
    address: str | None = Field(
        None, description="Delivery address: street, city, state[, zip]"
    )
    contact_phone: str | None = Field(
        None, description="Phone for delivery notifications"
    )
    email: str | None = Field(None, description="Email for the receipt")
    credit_card_number: str | None = Field(None, description="Card number")
    expiration_date: str | None = Field(None, description="Card expiry as MM/YY")
    cvv: str | None = Field(None, description="Card security code")
    delivery_method: str | None = Field(None, description="'delivery' or 'pickup'")
    confirm: Literal["yes", "no"] = Field(
        description="'yes' only after the customer confirmed the read-back"
    )


class TransferArgs(_Args):
    reason: str = Field("", description="Why the conversation is handed over")


class NoArgs(_Args):
    pass


@dataclass(frozen=True)
class _Tool:
    description: str
    args: type[BaseModel]
    run: Callable[[str, Any], dict[str, Any]]


# ---- dispatcher ------------------------------------------------------------


@dataclass(frozen=True)
class ToolCallDispatcher:
    """
    Entry point for function calls made by the realtime model.

    Every call answers with a JSON-ready dict carrying ``success`` and
    ``message``; failures never raise. When ``call_id`` is given the first
    response is stored and replayed for retries of the same call.
    """

    checkout: CheckoutUseCase
    handoff: HandoffUseCase
    cart: CartUseCase
    catalog: MenuCatalog
    idempotency: IdempotencyStore | None = None
    clock: Callable[[], datetime] = now_utc

    @property
    def _tools(self) -> dict[str, _Tool]:
        return {
            "update_order_data": _Tool(
                "Update one or more fields of the customer order (cart, contact "
                "info, payment info). Send confirm='yes' only after the customer "
                "confirmed every field.",
                UpdateOrderDataArgs,
                self._update_order_data,
            ),
            "transfer_to_payment": _Tool(
                "Hand the conversation to the payment agent once the cart is ready.",
                TransferArgs,
                lambda sid, a: self._transfer(sid, AgentRole.SALES, AgentRole.PAYMENT, a),
            ),
            "transfer_to_sales": _Tool(
                "Hand the conversation back to the sales agent to change menu items.",
                TransferArgs,
                lambda sid, a: self._transfer(sid, AgentRole.PAYMENT, AgentRole.SALES, a),
            ),
            "get_cart_summary": _Tool(
                "Read the current cart with totals, discounts and suggestions.",
                NoArgs,
                self._get_cart_summary,
            ),
        }

    def tool_definitions(self) -> list[dict[str, Any]]:
        menu = [e.name for e in self.catalog.entries() if e.available]
        defs = []
        for name, tool in self._tools.items():
            schema = tool.args.model_json_schema()
            line = schema.get("$defs", {}).get("CartLineArgs")
            if line is not None:
                line["properties"]["menu_item"]["enum"] = menu
                line["properties"]["quantity"]["minimum"] = 1
            defs.append(
                {
                    "type": "function",
                    "name": name,
                    "description": tool.description,
                    "parameters": schema,
                }
            )
        return defs

    def dispatch(
        self,
        session_id: str,
        tool_name: str,
        arguments: Mapping[str, Any] | str | None,
        call_id: str | None = None,
    ) -> dict[str, Any]:
        log = logger.bind(session_id=session_id, tool=tool_name, call_id=call_id)

        tool = self._tools.get(tool_name)
        if tool is None:
            log.info("tool_unknown")
            return {
                "success": False,
                "error": "UnknownTool",
                "message": f"unknown tool: {tool_name}",
            }

        try:
            raw = _load_arguments(arguments)
            args = tool.args.model_validate(raw)
        except (ValueError, pydantic.ValidationError) as e:
            log.info("tool_arguments_invalid", error=str(e))
            return _invalid_arguments(e)

        store = self.idempotency
        if call_id is None or store is None:
            return tool.run(session_id, args)

        request_hash = _request_hash(tool_name, args)
        replay = self._replay(store, session_id, call_id, request_hash)
        if isinstance(replay, Failure):
            return _failure(replay.failure())
        stored = replay.unwrap()
        if stored is not None:
            log.info("tool_call_replayed")
            return stored

        response = tool.run(session_id, args)
        if response.get("error") not in _TRANSIENT:
            self._record(store, session_id, call_id, request_hash, response)
        return response

    # ---- idempotency -------------------------------------------------------

    def _replay(
        self, store: IdempotencyStore, session_id: str, call_id: str, request_hash: str
    ) -> Result[dict[str, Any] | None, CheckoutError]:
        def check(rec: IdempotencyRecord | None) -> Result[dict[str, Any] | None, CheckoutError]:
            if rec is None:
                return Success(None)
            if rec.request_hash != request_hash:
                return Failure(
                    IdempotencyKeyConflict(
                        message="call_id reused with different arguments", key=call_id
                    )
                )
            return Success(json.loads(rec.response_json))

        return store.get(session_id, call_id).bind(check)

    def _record(
        self,
        store: IdempotencyStore,
        session_id: str,
        call_id: str,
        request_hash: str,
        response: dict[str, Any],
    ) -> None:
        rec = IdempotencyRecord(
            request_hash=request_hash,
            response_json=json.dumps(response, ensure_ascii=False, sort_keys=True),
            recorded_at=self.clock(),
        )
        stored = store.put(session_id, call_id, rec)
        if isinstance(stored, Failure):
            logger.warning(
                "tool_call_not_recorded",
                session_id=session_id,
                call_id=call_id,
                error=str(stored.failure()),
            )

    # ---- tools -------------------------------------------------------------

    def _update_order_data(
        self, session_id: str, args: UpdateOrderDataArgs
    ) -> dict[str, Any]:
        cmd = UpdateOrderDataCommand(
            session_id=session_id,
            confirm=Confirm(args.confirm),
            cart=(
                tuple(CartLineInput(ln.menu_item, ln.quantity) for ln in args.cart)
                if args.cart is not None
                else None
            ),
            name=args.name,
            address=args.address,
            contact_phone=args.contact_phone,
            email=args.email,
            credit_card_number=args.credit_card_number,
            expiration_date=args.expiration_date,
            cvv=args.cvv,
            delivery_method=args.delivery_method,
        )
        return _respond(self.checkout.apply_update(cmd), _outcome_to_dict)

    def _transfer(
        self, session_id: str, from_role: AgentRole, to_role: AgentRole, args: TransferArgs
    ) -> dict[str, Any]:
        cmd = HandoffCommand(session_id, from_role, to_role, reason=args.reason)
        return _respond(self.handoff.request_handoff(cmd), _handoff_to_dict)

    def _get_cart_summary(self, session_id: str, _: NoArgs) -> dict[str, Any]:
        return _respond(
            self.cart.get_summary(session_id),
            lambda v: {
                "success": True,
                "message": f"{v.item_count} line(s), {v.total_quantity} item(s) in cart",
                "cart": cart_summary_to_dict(v),
            },
        )


_TRANSIENT = {PersistenceError.__name__, PublishError.__name__}


def _load_arguments(arguments: Mapping[str, Any] | str | None) -> Any:
    if arguments is None:
        return {}
    if isinstance(arguments, str):
        return json.loads(arguments) if arguments.strip() else {}
    return dict(arguments)


def _request_hash(tool_name: str, args: BaseModel) -> str:
    payload = {"tool": tool_name, "arguments": args.model_dump(mode="json")}
    blob = json.dumps(
        payload, ensure_ascii=False, sort_keys=True, separators=(",", ":")
    ).encode("utf-8")
    return hashlib.sha256(blob).hexdigest()


def _respond(
    result: Result[Any, CheckoutError], render: Callable[[Any], dict[str, Any]]
) -> dict[str, Any]:
    if isinstance(result, Success):
        return render(result.unwrap())
    return _failure(result.failure())


def _failure(err: CheckoutError) -> dict[str, Any]:
    return {
        "success": False,
        "error": type(err).__name__,
        "message": err.message,
        **error_details(err),
    }


def _invalid_arguments(e: Exception) -> dict[str, Any]:
    body: dict[str, Any] = {
        "success": False,
        "error": "InvalidArguments",
        "message": "arguments do not match the tool schema",
    }
    if isinstance(e, pydantic.ValidationError):
        body["details"] = [
            {"loc": [str(p) for p in x["loc"]], "msg": x["msg"], "type": x["type"]}
            for x in e.errors()
        ]
    else:
        body["details"] = [{"loc": [], "msg": str(e), "type": "json_invalid"}]
    return body


def _outcome_to_dict(outcome: UpdateOutcome) -> dict[str, Any]:
    draft = outcome.draft
    if outcome.order is not None:
        return {
            "success": True,
            "message": (
                "order already finalized; nothing changed"
                if draft is None
                else "order confirmed"
            ),
            "order": outcome.order.to_dict(),
        }
    if draft is None:
        return {"success": False, "error": "DraftNotFound", "message": "no draft for session"}

    missing = list(draft.missing)
    if outcome.rejected:
        message = "some fields were rejected: " + ", ".join(
            e.field for e in outcome.rejected
        )
    elif missing:
        message = "order data updated; still needed: " + ", ".join(missing)
    else:
        message = "order data complete; read it back and ask for confirmation"
    return {
        "success": True,
        "message": message,
        "draft": draft_to_dict(draft),
        "rejected": rejected_to_list(outcome.rejected),
        "missing": missing,
    }


def _handoff_to_dict(event: HandoffRequested) -> dict[str, Any]:
    profile = describe(event.to_role)
    return {
        "success": True,
        "message": f"transferring to {profile.display_name}",
        "handoff": {
            "from_role": event.from_role.value,
            "to_role": event.to_role.value,
            "reason": event.reason,
        },
        "agent": {
            "role": profile.role.value,
            "display_name": profile.display_name,
            "voice": profile.voice,
            "temperature": profile.temperature,
        },
    }
