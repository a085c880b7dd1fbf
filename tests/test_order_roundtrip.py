import json

from returns.result import Failure

from voice_checkout.core.domain.model.draft import Confirm
from voice_checkout.core.domain.model.errors import (
    InvalidStatusTransition,
    OrderNotFound,
    ValidationError,
)
from voice_checkout.core.domain.model.order import ConfirmedOrder
from voice_checkout.core.domain.model.order_status import OrderStatus
from voice_checkout.core.ports.inbound.checkout import CartLineInput, UpdateOrderDataCommand
from voice_checkout.core.ports.inbound.orders import AdvanceOrderCommand, GetOrderQuery


def _confirmed(wiring, args):
    cmd = UpdateOrderDataCommand(
        session_id="s-1",
        confirm=Confirm.YES,
        cart=tuple(CartLineInput(x["menu_item"], x["quantity"]) for x in args["cart"]),
        **{k: v for k, v in args.items() if k != "cart"},
    )
    return wiring.checkout.apply_update(cmd).unwrap().order


def test_serialization_keeps_pricing_and_items(wiring, full_order_args):
    order = _confirmed(wiring, full_order_args)

    restored = ConfirmedOrder.from_dict(json.loads(json.dumps(order.to_dict())))

    assert restored == order
    assert restored.pricing.tax.amount == order.pricing.tax.amount
    assert restored.pricing.discounts == order.pricing.discounts


def test_serialized_order_holds_no_card_secrets(wiring, full_order_args):
    blob = json.dumps(_confirmed(wiring, full_order_args).to_dict())

    assert "4111111111111111" not in blob
    assert '"123"' not in blob


def test_advance_order_through_lifecycle(wiring, full_order_args):
    order_id = str(_confirmed(wiring, full_order_args).order_id.value)

    for target in ("processing", "shipped", "delivered"):
        order = wiring.lifecycle.advance(AdvanceOrderCommand(order_id, target)).unwrap()
        assert order.status is OrderStatus(target)

    stored = wiring.lifecycle.get_order(GetOrderQuery(order_id)).unwrap()
    assert stored.status is OrderStatus.DELIVERED
    assert stored.status.is_completed()


def test_illegal_advance_keeps_status(wiring, full_order_args):
    order_id = str(_confirmed(wiring, full_order_args).order_id.value)

    result = wiring.lifecycle.advance(AdvanceOrderCommand(order_id, "delivered"))

    assert isinstance(result.failure(), InvalidStatusTransition)
    stored = wiring.lifecycle.get_order(GetOrderQuery(order_id)).unwrap()
    assert stored.status is OrderStatus.CONFIRMED


def test_get_order_errors(wiring):
    assert isinstance(wiring.lifecycle.get_order(GetOrderQuery("nope")).failure(), ValidationError)
    missing = wiring.lifecycle.get_order(
        GetOrderQuery("00000000-0000-0000-0000-000000000000")
    )
    assert isinstance(missing, Failure)
    assert isinstance(missing.failure(), OrderNotFound)


def test_advance_with_unknown_status(wiring, full_order_args):
    order_id = str(_confirmed(wiring, full_order_args).order_id.value)

    result = wiring.lifecycle.advance(AdvanceOrderCommand(order_id, "teleported"))

    assert isinstance(result.failure(), ValidationError)
