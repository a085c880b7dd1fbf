from __future__ import annotations

from typing import Any

import structlog
from fastapi import Body, FastAPI, Header, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from returns.result import Success

from voice_checkout.adapters.inbound.presenters import (
    cart_summary_to_dict,
    draft_to_dict,
    error_details,
    money,
)
from voice_checkout.adapters.inbound.tool_calls import ToolCallDispatcher
from voice_checkout.core.domain.model.errors import (
    CartInactive,
    CartNotFound,
    CheckoutError,
    DraftNotFound,
    IdempotencyKeyConflict,
    IncompleteOrder,
    InvalidHandoff,
    InvalidStatusTransition,
    OrderNotFound,
    PaymentDeclined,
    PublishError,
    ValidationError,
)
from voice_checkout.core.ports.inbound.cart import (
    AddItemCommand,
    CartUseCase,
    RemoveItemCommand,
    UpdateItemQuantityCommand,
)
from voice_checkout.core.ports.inbound.checkout import CheckoutUseCase
from voice_checkout.core.ports.inbound.orders import (
    AdvanceOrderCommand,
    GetOrderQuery,
    OrderLifecycleUseCase,
)
from voice_checkout.core.ports.outbound.catalog import MenuCatalog

logger = structlog.get_logger(__name__)

# ---- HTTP DTOs (adapter layer) ---------------------------------------------


class AddItemRequest(BaseModel):
    menu_item: str = Field(min_length=1, examples=["Cheeseburger"])
    quantity: int = Field(1, examples=[2])


class UpdateQuantityRequest(BaseModel):
    quantity: int = Field(examples=[3])


class AdvanceStatusRequest(BaseModel):
    status: str = Field(min_length=1, examples=["processing"])


class MenuEntryOut(BaseModel):
    name: str
    category: str
    unit_price: str
    available: bool


class ErrorResponse(BaseModel):
    type: str
    message: str
    details: Any = None


def _map_error_to_http(err: CheckoutError) -> tuple[int, ErrorResponse]:
    def body() -> ErrorResponse:
        return ErrorResponse(
            type=type(err).__name__, message=err.message, details=error_details(err) or None
        )

    if isinstance(err, ValidationError):
        return 400, body()

    if isinstance(err, IncompleteOrder):
        return 422, body()

    if isinstance(err, (CartNotFound, DraftNotFound, OrderNotFound)):
        return 404, body()

    if isinstance(
        err, (InvalidStatusTransition, InvalidHandoff, IdempotencyKeyConflict, CartInactive)
    ):
        return 409, body()

    if isinstance(err, PaymentDeclined):
        return 402, body()

    if isinstance(err, PublishError):
        return 503, body()

    return 500, body()


_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    402: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def create_app(
    checkout_uc: CheckoutUseCase,
    cart_uc: CartUseCase,
    orders_uc: OrderLifecycleUseCase,
    dispatcher: ToolCallDispatcher,
    catalog: MenuCatalog,
) -> FastAPI:
    app = FastAPI(title="voice_checkout")

    # --- exception handlers ------------------------------------------------

    @app.exception_handler(CheckoutError)
    async def handle_domain_error(_: Request, exc: CheckoutError) -> JSONResponse:
        status, body = _map_error_to_http(exc)
        return JSONResponse(status_code=status, content=body.model_dump())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        body = ErrorResponse(
            type="RequestValidationError",
            message="invalid request",
            details=[
                {"loc": [str(p) for p in e["loc"]], "msg": e["msg"], "type": e["type"]}
                for e in exc.errors()
            ],
        )
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(Exception)
    async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", error_type=type(exc).__name__)
        body = ErrorResponse(type=type(exc).__name__, message="internal server error")
        return JSONResponse(status_code=500, content=body.model_dump())

    # --- routes --------------------------------------------------------------

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/menu", response_model=list[MenuEntryOut])
    def menu() -> Any:
        return [
            MenuEntryOut(
                name=e.name,
                category=e.category.value,
                unit_price=money(e.unit_price),
                available=e.available,
            )
            for e in catalog.entries()
        ]

    @app.get("/tools")
    def tools() -> list[dict[str, Any]]:
        return dispatcher.tool_definitions()

    @app.post("/sessions/{session_id}/tools/{tool_name}", responses={404: {"model": ErrorResponse}})
    def call_tool(
        session_id: str,
        tool_name: str,
        arguments: dict[str, Any] | None = Body(None),
        call_id: str | None = Header(None, alias="Call-Id"),
    ) -> Any:
        # the body is the model-facing answer, so tool failures stay 200
        result = dispatcher.dispatch(session_id, tool_name, arguments, call_id=call_id)
        if result.get("error") == "UnknownTool":
            return JSONResponse(status_code=404, content=result)
        return result

    @app.get("/sessions/{session_id}/draft", responses=_ERROR_RESPONSES)
    def get_draft(session_id: str) -> Any:
        result = checkout_uc.get_draft(session_id)
        if isinstance(result, Success):
            return draft_to_dict(result.unwrap())
        raise result.failure()

    @app.delete("/sessions/{session_id}", status_code=204, responses=_ERROR_RESPONSES)
    def abandon(session_id: str) -> Response:
        result = checkout_uc.abandon(session_id)
        if isinstance(result, Success):
            return Response(status_code=204)
        raise result.failure()

    @app.get("/sessions/{session_id}/cart", responses=_ERROR_RESPONSES)
    def get_cart(session_id: str) -> Any:
        result = cart_uc.get_summary(session_id)
        if isinstance(result, Success):
            return cart_summary_to_dict(result.unwrap())
        raise result.failure()

    @app.post("/sessions/{session_id}/cart/items", responses=_ERROR_RESPONSES)
    def add_item(session_id: str, req: AddItemRequest) -> Any:
        result = cart_uc.add_item(
            AddItemCommand(session_id=session_id, menu_item=req.menu_item, quantity=req.quantity)
        )
        if isinstance(result, Success):
            return cart_summary_to_dict(result.unwrap())
        raise result.failure()

    @app.patch("/sessions/{session_id}/cart/items/{menu_item}", responses=_ERROR_RESPONSES)
    def update_item(session_id: str, menu_item: str, req: UpdateQuantityRequest) -> Any:
        result = cart_uc.update_quantity(
            UpdateItemQuantityCommand(
                session_id=session_id, menu_item=menu_item, quantity=req.quantity
            )
        )
        if isinstance(result, Success):
            return cart_summary_to_dict(result.unwrap())
        raise result.failure()

    @app.delete("/sessions/{session_id}/cart/items/{menu_item}", responses=_ERROR_RESPONSES)
    def remove_item(session_id: str, menu_item: str) -> Any:
        result = cart_uc.remove_item(
            RemoveItemCommand(session_id=session_id, menu_item=menu_item)
        )
        if isinstance(result, Success):
            return cart_summary_to_dict(result.unwrap())
        raise result.failure()

    @app.get("/orders/{order_id}", responses=_ERROR_RESPONSES)
    def get_order(order_id: str) -> Any:
        result = orders_uc.get_order(GetOrderQuery(order_id=order_id))
        if isinstance(result, Success):
            return result.unwrap().to_dict()
        raise result.failure()

    @app.post("/orders/{order_id}/status", responses=_ERROR_RESPONSES)
    def advance_order(order_id: str, req: AdvanceStatusRequest) -> Any:
        result = orders_uc.advance(
            AdvanceOrderCommand(order_id=order_id, target_status=req.status)
        )
        if isinstance(result, Success):
            return result.unwrap().to_dict()
        raise result.failure()

    return app
