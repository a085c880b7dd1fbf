import json

import pytest


def test_update_order_data_reports_missing_fields(wiring):
    result = wiring.dispatcher.dispatch(
        "s-1",
        "update_order_data",
        {"cart": [{"menu_item": "Fries", "quantity": 2}], "name": "Juan Perez", "confirm": "no"},
    )

    assert result["success"] is True
    assert result["missing"] == [
        "address",
        "contact_phone",
        "email",
        "credit_card_number",
        "expiration_date",
        "cvv",
    ]
    assert result["draft"]["cart"][0] == {
        "menu_item": "Fries",
        "quantity": 2,
        "unit_price": "3.19",
        "subtotal": "6.38",
        "category": "sides",
    }


def test_arguments_may_arrive_as_json_text(wiring):
    result = wiring.dispatcher.dispatch(
        "s-1", "update_order_data", json.dumps({"email": "a@b.co", "confirm": "no"})
    )

    assert result["success"] is True
    assert result["draft"]["email"] == "a@b.co"


def test_numeric_fields_are_accepted_as_numbers(wiring):
    result = wiring.dispatcher.dispatch(
        "s-1", "update_order_data", {"cvv": 123, "contact_phone": 5551234567, "confirm": "no"}
    )

    assert result["success"] is True
    assert result["draft"]["cvv"] == "***"


@pytest.mark.parametrize(
    "arguments",
    [
        {"name": "Juan"},
        {"name": "Juan", "confirm": "maybe"},
        {"name": "Juan", "confirm": "no", "favourite_colour": "red"},
        "{not json",
    ],
)
def test_malformed_arguments_are_rejected(wiring, arguments):
    result = wiring.dispatcher.dispatch("s-1", "update_order_data", arguments)

    assert result["success"] is False
    assert result["error"] == "InvalidArguments"
    assert len(wiring.drafts) == 0


def test_incomplete_confirm_lists_missing_fields(wiring):
    result = wiring.dispatcher.dispatch(
        "s-1",
        "update_order_data",
        {"cart": [{"menu_item": "Cheeseburger", "quantity": 1}], "name": "Juan Perez", "confirm": "yes"},
    )

    assert result["success"] is False
    assert result["error"] == "IncompleteOrder"
    assert "address" in result["missing"]


def test_full_flow_then_transfer_to_sales(wiring, full_order_args):
    confirmed = wiring.dispatcher.dispatch(
        "s-1", "update_order_data", dict(full_order_args, confirm="yes")
    )
    assert confirmed["success"] is True
    assert confirmed["order"]["status"] == "confirmed"

    transfer = wiring.dispatcher.dispatch("s-1", "transfer_to_sales", {})
    assert transfer["success"] is True
    assert transfer["handoff"] == {"from_role": "payment", "to_role": "sales", "reason": ""}
    assert transfer["agent"]["display_name"] == "Sales Agent"

    again = wiring.dispatcher.dispatch(
        "s-1", "update_order_data", dict(full_order_args, confirm="yes")
    )
    assert again["order"] == confirmed["order"]
    assert "already finalized" in again["message"]


def test_transfer_to_payment(wiring):
    result = wiring.dispatcher.dispatch("s-1", "transfer_to_payment", None)

    assert result["success"] is True
    assert result["handoff"]["to_role"] == "payment"


def test_get_cart_summary(wiring):
    wiring.dispatcher.dispatch(
        "s-1",
        "update_order_data",
        {"cart": [{"menu_item": "Double Cheeseburger", "quantity": 5}], "confirm": "no"},
    )

    result = wiring.dispatcher.dispatch("s-1", "get_cart_summary", {})

    assert result["success"] is True
    cart = result["cart"]
    assert cart["total_quantity"] == 5
    assert cart["pricing"]["subtotal"] == "28.95"
    assert [d["type"] for d in cart["pricing"]["discounts"]] == [
        "QUANTITY_DISCOUNT",
        "MINIMUM_ORDER",
    ]


def test_unknown_tool(wiring):
    result = wiring.dispatcher.dispatch("s-1", "order_pizza", {})

    assert result == {
        "success": False,
        "error": "UnknownTool",
        "message": "unknown tool: order_pizza",
    }


# ============ call_id replay ============


def test_retry_with_same_call_id_replays_response(wiring, full_order_args):
    args = dict(full_order_args, confirm="yes")

    first = wiring.dispatcher.dispatch("s-1", "update_order_data", args, call_id="call-1")
    retry = wiring.dispatcher.dispatch("s-1", "update_order_data", args, call_id="call-1")

    assert retry == first
    assert len(wiring.payment.charges) == 1


def test_same_call_id_with_other_arguments_conflicts(wiring):
    wiring.dispatcher.dispatch(
        "s-1", "update_order_data", {"name": "Juan Perez", "confirm": "no"}, call_id="call-1"
    )

    result = wiring.dispatcher.dispatch(
        "s-1", "update_order_data", {"name": "Ana Gomez", "confirm": "no"}, call_id="call-1"
    )

    assert result["success"] is False
    assert result["error"] == "IdempotencyKeyConflict"
    assert wiring.checkout.get_draft("s-1").unwrap().name == "Juan Perez"


def test_call_ids_are_scoped_per_session(wiring):
    a = wiring.dispatcher.dispatch(
        "s-1", "update_order_data", {"name": "Juan Perez", "confirm": "no"}, call_id="call-1"
    )
    b = wiring.dispatcher.dispatch(
        "s-2", "update_order_data", {"name": "Ana Gomez", "confirm": "no"}, call_id="call-1"
    )

    assert a["draft"]["name"] == "Juan Perez"
    assert b["draft"]["name"] == "Ana Gomez"


# ============ tool definitions ============


def test_tool_definitions_expose_schemas(wiring):
    defs = {d["name"]: d for d in wiring.dispatcher.tool_definitions()}

    assert set(defs) == {
        "update_order_data",
        "transfer_to_payment",
        "transfer_to_sales",
        "get_cart_summary",
    }
    params = defs["update_order_data"]["parameters"]
    assert params["required"] == ["confirm"]
    assert params["properties"]["confirm"]["enum"] == ["yes", "no"]
    line = params["$defs"]["CartLineArgs"]
    assert "Fries" in line["properties"]["menu_item"]["enum"]
    json.dumps(defs)
