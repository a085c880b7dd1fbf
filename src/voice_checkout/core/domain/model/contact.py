from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from voice_checkout.core.domain.model.errors import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_ZIP_RE = re.compile(r"^[0-9]{5}(-[0-9]{4})?$")
_PHONE_SEPARATORS = re.compile(r"[\s\-.()]")
_PHONE_DIGITS_RE = re.compile(r"[0-9]+")

MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15


@dataclass(frozen=True)
class CustomerName:
    value: str

    def __post_init__(self) -> None:
        if not self.value.strip():
            raise ValidationError("name is required")
        if len(self.value) > 100:
            raise ValidationError("name cannot exceed 100 characters")

    @staticmethod
    def parse(raw: str) -> "CustomerName":
        return CustomerName(" ".join(raw.split()))


@dataclass(frozen=True)
class Email:
    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValidationError("email cannot be empty")
        if len(self.value) > 254:
            raise ValidationError("email address is too long")
        if not _EMAIL_RE.match(self.value):
            raise ValidationError("invalid email format")
        local, domain = self.value.rsplit("@", 1)
        if len(local) > 64:
            raise ValidationError("email local part is too long")
        if ".." in self.value or local.startswith(".") or local.endswith("."):
            raise ValidationError("invalid email format: invalid dot usage")
        if domain.startswith(".") or domain.endswith("."):
            raise ValidationError("invalid email format: invalid dot usage")

    @staticmethod
    def parse(raw: str) -> "Email":
        return Email(raw.strip().lower())

    @property
    def domain(self) -> str:
        return self.value.rsplit("@", 1)[1]


@dataclass(frozen=True)
class PhoneNumber:
    """Digits only, with an optional leading ``+``."""

    value: str

    def __post_init__(self) -> None:
        digits = self.value[1:] if self.value.startswith("+") else self.value
        if _PHONE_DIGITS_RE.fullmatch(digits) is None:
            raise ValidationError("phone number contains invalid characters")
        if len(digits) < MIN_PHONE_DIGITS:
            raise ValidationError("phone number is too short")
        if len(digits) > MAX_PHONE_DIGITS:
            raise ValidationError("phone number is too long")

    @staticmethod
    def parse(raw: str) -> "PhoneNumber":
        return PhoneNumber(_PHONE_SEPARATORS.sub("", raw.strip()))

    @property
    def digits(self) -> str:
        return self.value.lstrip("+")

    def display(self) -> str:
        d = self.digits
        if len(d) == 10:
            return f"({d[:3]}) {d[3:6]}-{d[6:]}"
        if len(d) == 11 and d.startswith("1"):
            return f"+1 ({d[1:4]}) {d[4:7]}-{d[7:]}"
        return self.value


@dataclass(frozen=True)
class DeliveryAddress:
    street: str
    city: str
    state: str
    zip_code: str = ""
    country: str = "US"

    def __post_init__(self) -> None:
        if not self.street.strip():
            raise ValidationError("street address is required")
        if not self.city.strip():
            raise ValidationError("city is required")
        if not self.state.strip():
            raise ValidationError("state is required")
        if len(self.street) > 100:
            raise ValidationError("street address cannot exceed 100 characters")
        if len(self.city) > 50:
            raise ValidationError("city cannot exceed 50 characters")
        if len(self.state) > 20:
            raise ValidationError("state cannot exceed 20 characters")
        if self.zip_code and self.country == "US" and not _ZIP_RE.match(self.zip_code):
            raise ValidationError("invalid US ZIP code format")

    @staticmethod
    def parse(raw: str) -> "DeliveryAddress":
        """Parse ``street, city, state[, zip[, country]]``."""
        parts = [p.strip() for p in raw.split(",")]
        if len(parts) < 3:
            raise ValidationError(
                "address must contain at least street, city, and state"
            )
        return DeliveryAddress(
            street=parts[0],
            city=parts[1],
            state=parts[2],
            zip_code=parts[3] if len(parts) > 3 else "",
            country=(parts[4] if len(parts) > 4 and parts[4] else "US").upper(),
        )

    def one_line(self) -> str:
        parts = [self.street, self.city, self.state]
        if self.zip_code:
            parts.append(self.zip_code)
        if self.country != "US":
            parts.append(self.country)
        return ", ".join(parts)


class DeliveryMethod(str, Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"

    @staticmethod
    def parse(raw: str) -> "DeliveryMethod":
        text = raw.strip().lower()
        for m in DeliveryMethod:
            if m.value == text:
                return m
        raise ValidationError(f"unknown delivery method: {raw!r}")
