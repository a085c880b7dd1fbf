from __future__ import annotations

import re
from dataclasses import dataclass

from voice_checkout.core.domain.model.errors import ValidationError

_CARD_SEPARATORS = re.compile(r"[\s\-]")
_EXPIRY_RE = re.compile(r"([0-9]{2})/([0-9]{2})")
_DIGITS_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class CardNumber:
    value: str

    def __post_init__(self) -> None:
        if _DIGITS_RE.fullmatch(self.value) is None:
            raise ValidationError("card number must contain only digits")
        if not 13 <= len(self.value) <= 19:
            raise ValidationError("card number must have 13 to 19 digits")

    @staticmethod
    def parse(raw: str) -> "CardNumber":
        return CardNumber(_CARD_SEPARATORS.sub("", raw.strip()))

    @property
    def last4(self) -> str:
        return self.value[-4:]

    def masked(self) -> str:
        return f"**** **** **** {self.last4}"


@dataclass(frozen=True)
class CardExpiry:
    month: int
    year: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValidationError("expiration month must be between 01 and 12")
        if not 0 <= self.year <= 99:
            raise ValidationError("expiration year must be two digits")

    @staticmethod
    def parse(raw: str) -> "CardExpiry":
        m = _EXPIRY_RE.fullmatch(raw.strip())
        if m is None:
            raise ValidationError("expiration date must be MM/YY")
        return CardExpiry(month=int(m.group(1)), year=int(m.group(2)))

    def __str__(self) -> str:
        return f"{self.month:02d}/{self.year:02d}"


@dataclass(frozen=True)
class Cvv:
    value: str

    def __post_init__(self) -> None:
        if _DIGITS_RE.fullmatch(self.value) is None or not 3 <= len(self.value) <= 4:
            raise ValidationError("cvv must be 3 or 4 digits")

    @staticmethod
    def parse(raw: str) -> "Cvv":
        return Cvv(raw.strip())

    def masked(self) -> str:
        return "*" * len(self.value)


@dataclass(frozen=True)
class PaymentSummary:
    """What survives of the card once the order is confirmed."""

    card_last4: str
    expiration_date: str
