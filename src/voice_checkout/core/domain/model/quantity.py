from __future__ import annotations

import re
from dataclasses import dataclass

from voice_checkout.core.domain.model.errors import ValidationError

MIN_QUANTITY = 1
MAX_QUANTITY = 99

_INTEGER_RE = re.compile(r"-?[0-9]+")


@dataclass(frozen=True, order=True)
class Quantity:
    """Units of one menu item, always within [1, 99].

    Construction outside the range fails; ``add`` saturates at the maximum.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(f"quantity must be a whole number: {self.value!r}")
        if self.value < MIN_QUANTITY:
            raise ValidationError(f"quantity cannot be less than {MIN_QUANTITY}")
        if self.value > MAX_QUANTITY:
            raise ValidationError(f"quantity cannot exceed {MAX_QUANTITY}")

    @staticmethod
    def parse(raw: int | str) -> "Quantity":
        if isinstance(raw, str):
            text = raw.strip()
            if _INTEGER_RE.fullmatch(text) is None:
                raise ValidationError(f"invalid quantity format: {raw!r}")
            return Quantity(int(text))
        return Quantity(raw)

    def add(self, other: "Quantity") -> "Quantity":
        return Quantity(min(MAX_QUANTITY, self.value + other.value))

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return "1 item" if self.value == 1 else f"{self.value} items"
