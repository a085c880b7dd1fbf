from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

from voice_checkout.core.domain.model.errors import ValidationError

CENT = Decimal("0.01")
MAX_UNIT_PRICE = Decimal("9999.99")


@dataclass(frozen=True)
class Money:
    """Non-negative USD amount.

    ``Money.of`` quantizes to cents. ``scale`` keeps the exact product so that
    rate-based amounts (tax, percentage discounts) carry sub-cent precision
    until they are displayed with ``rounded``.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError("amount must be a Decimal")
        if not self.amount.is_finite():
            raise ValidationError("amount must be finite")
        if self.amount < 0:
            raise ValidationError(f"amount cannot be negative: {self.amount}")

    @staticmethod
    def of(amount: Decimal | int | str | float, currency: str = "USD") -> "Money":
        if isinstance(amount, bool):
            raise ValidationError("amount must be numeric")
        try:
            dec = Decimal(str(amount))
        except InvalidOperation as exc:
            raise ValidationError(f"amount must be numeric: {amount!r}") from exc
        if not dec.is_finite():
            raise ValidationError(f"amount must be finite: {amount!r}")
        return Money(dec.quantize(CENT, rounding=ROUND_HALF_UP), currency)

    @staticmethod
    def zero(currency: str = "USD") -> "Money":
        return Money(Decimal("0.00"), currency)

    def __add__(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: "Money") -> "Money":
        # clamps at zero
        self._assert_same_currency(other)
        return Money(max(self.amount - other.amount, Decimal("0")), self.currency)

    def __mul__(self, n: int) -> "Money":
        if isinstance(n, bool) or not isinstance(n, int):
            raise ValidationError("money can only be multiplied by an int")
        if n < 0:
            raise ValidationError("multiplier cannot be negative")
        return Money(
            (self.amount * Decimal(n)).quantize(CENT, rounding=ROUND_HALF_UP),
            self.currency,
        )

    def scale(self, rate: Decimal) -> "Money":
        if rate < 0:
            raise ValidationError("rate cannot be negative")
        return Money(self.amount * rate, self.currency)

    def rounded(self) -> "Money":
        return Money(self.amount.quantize(CENT, rounding=ROUND_HALF_UP), self.currency)

    def to_cents(self) -> int:
        return int(self.rounded().amount * 100)

    def is_zero(self) -> bool:
        return self.amount == 0

    def at_least(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    def display(self) -> str:
        return f"${self.rounded().amount}"

    def _assert_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"currency_mismatch: {self.currency} vs {other.currency}"
            )


def unit_price(amount: Decimal | int | str | float) -> Money:
    price = Money.of(amount)
    if price.is_zero():
        raise ValidationError("unit price must be positive")
    if price.amount > MAX_UNIT_PRICE:
        raise ValidationError(f"unit price cannot exceed {MAX_UNIT_PRICE}")
    return price


def fold_money(values: Iterable[Money], currency: str = "USD") -> Money:
    total = Money.zero(currency=currency)
    for v in values:
        total = total + v
    return total
