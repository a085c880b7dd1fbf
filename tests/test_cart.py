from datetime import timedelta
from decimal import Decimal

from returns.result import Failure, Success

from voice_checkout.core.domain.model.cart import Cart, NewCartLine
from voice_checkout.core.domain.model.draft import Confirm
from voice_checkout.core.domain.model.errors import (
    CartInactive,
    CartNotFound,
    ValidationError,
)
from voice_checkout.core.domain.model.money import Money
from voice_checkout.core.domain.model.quantity import Quantity
from voice_checkout.core.ports.inbound.cart import (
    AddItemCommand,
    RemoveItemCommand,
    UpdateItemQuantityCommand,
)
from voice_checkout.core.ports.inbound.checkout import UpdateOrderDataCommand


# ============ Cart entity ============


def test_add_item_merges_by_name_and_clamps(clock):
    cart = Cart.open("s-1", clock())
    price = Money.of("3.19")

    cart.add_item("Fries", Quantity(60), price, clock())
    cart.add_item("Fries", Quantity(60), price, clock())

    assert len(cart.items) == 1
    assert cart.items[0].quantity.value == 99


def test_update_quantity_zero_removes_and_over_max_fails(clock):
    cart = Cart.open("s-1", clock())
    cart.add_item("Fries", Quantity(2), Money.of("3.19"), clock())

    assert isinstance(cart.update_quantity("Fries", 100, clock()), Failure)
    assert cart.find("Fries").quantity.value == 2

    assert isinstance(cart.update_quantity("Fries", 0, clock()), Success)
    assert cart.snapshot().is_empty


def test_update_quantity_unknown_item_fails(clock):
    cart = Cart.open("s-1", clock())

    result = cart.update_quantity("Fries", 2, clock())

    assert isinstance(result.failure(), ValidationError)


def test_replace_items_merges_duplicates_and_keeps_added_at(clock):
    cart = Cart.open("s-1", clock())
    price = Money.of("3.19")
    cart.add_item("Fries", Quantity(1), price, clock())
    first_added = cart.items[0].added_at
    clock.advance(5)

    snap = cart.replace_items(
        [NewCartLine("Fries", Quantity(2), price), NewCartLine("Fries", Quantity(1), price)],
        clock(),
    ).unwrap()

    assert snap.total_quantity == 3
    assert snap.items[0].added_at == first_added
    assert cart.last_activity == clock()


def test_inactive_cart_rejects_mutations(clock):
    cart = Cart.open("s-1", clock())
    cart.deactivate(clock())

    result = cart.add_item("Fries", Quantity(1), Money.of("3.19"), clock())

    assert isinstance(result.failure(), CartInactive)


def test_cart_expiry_window(clock):
    cart = Cart.open("s-1", clock())

    assert not cart.is_expired(clock() + timedelta(minutes=30))
    assert cart.is_expired(clock() + timedelta(minutes=31))


# ============ CartService ============


def test_add_item_resolves_price_from_catalog(wiring):
    result = wiring.cart.add_item(AddItemCommand("s-1", "cheeseburger", 2))

    view = result.unwrap()
    assert view.items[0].name == "Cheeseburger"
    assert view.items[0].unit_price.amount == Decimal("3.49")
    assert view.pricing.subtotal.amount == Decimal("6.98")
    assert {r.title for r in view.recommendations} == {"Add a Drink", "Add Fries"}


def test_add_unknown_item_fails(wiring):
    result = wiring.cart.add_item(AddItemCommand("s-1", "Pizza", 1))

    assert isinstance(result.failure(), ValidationError)


def test_update_and_remove_use_catalog_spelling(wiring):
    wiring.cart.add_item(AddItemCommand("s-1", "Fries", 1))

    view = wiring.cart.update_quantity(UpdateItemQuantityCommand("s-1", "fries", 4)).unwrap()
    assert view.total_quantity == 4

    view = wiring.cart.remove_item(RemoveItemCommand("s-1", "FRIES")).unwrap()
    assert view.item_count == 0


def test_summary_for_unknown_session(wiring):
    result = wiring.cart.get_summary("nobody")

    assert isinstance(result.failure(), CartNotFound)


def test_update_on_unknown_session_does_not_create_one(wiring):
    result = wiring.cart.update_quantity(UpdateItemQuantityCommand("nobody", "Fries", 2))

    assert isinstance(result.failure(), CartNotFound)
    assert len(wiring.drafts) == 0


def test_expired_cart_is_dropped_at_read_time(wiring):
    wiring.cart.add_item(AddItemCommand("s-1", "Fries", 1))
    wiring.clock.advance(31)

    assert isinstance(wiring.cart.get_summary("s-1").failure(), CartNotFound)


def test_first_order_discount_uses_draft_email(wiring):
    wiring.checkout.apply_update(
        UpdateOrderDataCommand("s-1", Confirm.NO, email="new@example.com")
    )
    view = wiring.cart.add_item(AddItemCommand("s-1", "Big Burger Combo", 1)).unwrap()
    assert view.pricing.total_discount.amount == Decimal("5.00")

    wiring.orders.known_customers.add("new@example.com")
    view = wiring.cart.get_summary("s-1").unwrap()
    assert view.pricing.total_discount.is_zero()
