from datetime import timedelta
from decimal import Decimal

import pytest

from voice_checkout.bootstrap import build_usecases, pricing_policy
from voice_checkout.config import Settings, load_settings


def test_defaults_when_environment_is_empty():
    s = load_settings({})

    assert s == Settings()
    assert s.cart_idle_window == timedelta(minutes=30)


def test_values_are_read_from_prefixed_variables():
    s = load_settings(
        {
            "VOICE_CHECKOUT_TAX_RATE": "0.07",
            "VOICE_CHECKOUT_INCLUDE_DELIVERY_FEE": "yes",
            "VOICE_CHECKOUT_CART_IDLE_MINUTES": "10",
            "VOICE_CHECKOUT_LOG_LEVEL": "debug",
            "VOICE_CHECKOUT_PAYMENT_DECLINE_CARDS": "4000 0000 0000 0002, 4000-0000-0000-0069",
        }
    )

    assert s.tax_rate == Decimal("0.07")
    assert s.include_delivery_fee is True
    assert s.cart_idle_window == timedelta(minutes=10)
    assert s.log_level == "DEBUG"
    assert s.payment_decline_cards == {"4000000000000002", "4000000000000069"}


@pytest.mark.parametrize(
    "env",
    [
        {"VOICE_CHECKOUT_TAX_RATE": "abc"},
        {"VOICE_CHECKOUT_TAX_RATE": "1.5"},
        {"VOICE_CHECKOUT_DELIVERY_FEE": "-1"},
        {"VOICE_CHECKOUT_CART_IDLE_MINUTES": "0"},
        {"VOICE_CHECKOUT_PORT": "eighty"},
        {"VOICE_CHECKOUT_LOG_JSON": "sometimes"},
    ],
)
def test_invalid_values_fail_at_startup(env):
    with pytest.raises(ValueError):
        load_settings(env)


def test_settings_flow_into_pricing_and_wiring():
    s = Settings(tax_rate=Decimal("0.05"), include_delivery_fee=True)

    policy = pricing_policy(s)
    usecases = build_usecases(s)

    assert policy.tax_rate == Decimal("0.05")
    assert policy.include_delivery_fee is True
    assert usecases.checkout.deps.policy == policy
    assert usecases.cart.deps.idle_window == s.cart_idle_window
