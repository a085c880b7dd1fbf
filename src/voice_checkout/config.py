from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv

_PREFIX = "VOICE_CHECKOUT_"
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    tax_rate: Decimal = Decimal("0.0825")
    delivery_fee: Decimal = Decimal("2.99")
    include_delivery_fee: bool = False
    cart_idle_minutes: int = 30
    log_level: str = "INFO"
    log_json: bool = False
    host: str = "127.0.0.1"
    port: int = 8000
    payment_decline_cards: frozenset[str] = frozenset()

    @property
    def cart_idle_window(self) -> timedelta:
        return timedelta(minutes=self.cart_idle_minutes)


def load_settings(env: dict[str, str] | None = None) -> Settings:
    """Read settings from ``env`` or, when omitted, from ``.env`` plus the process environment."""
    if env is None:
        load_dotenv()
        env = dict(os.environ)

    def get(name: str) -> str | None:
        return env.get(_PREFIX + name)

    defaults = Settings()
    tax_rate = _decimal("TAX_RATE", get("TAX_RATE"), defaults.tax_rate)
    if not Decimal("0") <= tax_rate < Decimal("1"):
        raise ValueError(f"{_PREFIX}TAX_RATE must be in [0, 1): {tax_rate}")
    delivery_fee = _decimal("DELIVERY_FEE", get("DELIVERY_FEE"), defaults.delivery_fee)
    if delivery_fee < 0:
        raise ValueError(f"{_PREFIX}DELIVERY_FEE cannot be negative: {delivery_fee}")
    idle = _int("CART_IDLE_MINUTES", get("CART_IDLE_MINUTES"), defaults.cart_idle_minutes)
    if idle <= 0:
        raise ValueError(f"{_PREFIX}CART_IDLE_MINUTES must be positive: {idle}")

    cards = get("PAYMENT_DECLINE_CARDS") or ""
    return Settings(
        tax_rate=tax_rate,
        delivery_fee=delivery_fee,
        include_delivery_fee=_bool(
            "INCLUDE_DELIVERY_FEE", get("INCLUDE_DELIVERY_FEE"), defaults.include_delivery_fee
        ),
        cart_idle_minutes=idle,
        log_level=(get("LOG_LEVEL") or defaults.log_level).upper(),
        log_json=_bool("LOG_JSON", get("LOG_JSON"), defaults.log_json),
        host=get("HOST") or defaults.host,
        port=_int("PORT", get("PORT"), defaults.port),
        payment_decline_cards=frozenset(
            c.strip().replace(" ", "").replace("-", "") for c in cards.split(",") if c.strip()
        ),
    )


def _decimal(name: str, raw: str | None, default: Decimal) -> Decimal:
    if raw is None or not raw.strip():
        return default
    try:
        value = Decimal(raw.strip())
    except InvalidOperation as exc:
        raise ValueError(f"{_PREFIX}{name} must be a number: {raw!r}") from exc
    if not value.is_finite():
        raise ValueError(f"{_PREFIX}{name} must be finite: {raw!r}")
    return value


def _int(name: str, raw: str | None, default: int) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{_PREFIX}{name} must be an integer: {raw!r}") from exc


def _bool(name: str, raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    text = raw.strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"{_PREFIX}{name} must be a boolean: {raw!r}")
