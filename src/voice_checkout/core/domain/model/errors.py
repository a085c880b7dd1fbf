from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CheckoutError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover
        return self.message


@dataclass(frozen=True)
class ValidationError(CheckoutError):
    pass


@dataclass(frozen=True)
class FieldValidationError(ValidationError):
    field: str

    def __str__(self) -> str:  # pragma: no cover
        return f"invalid_field: {self.field} ({self.message})"


@dataclass(frozen=True)
class RejectedFields(ValidationError):
    errors: tuple[FieldValidationError, ...]

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(e.field for e in self.errors)

    def __str__(self) -> str:  # pragma: no cover
        return f"rejected_fields: {', '.join(self.fields)} ({self.message})"


@dataclass(frozen=True)
class IncompleteOrder(CheckoutError):
    missing: tuple[str, ...]

    def __str__(self) -> str:  # pragma: no cover
        return f"incomplete_order: missing={', '.join(self.missing)} ({self.message})"


@dataclass(frozen=True)
class InvalidStatusTransition(CheckoutError):
    current: str
    target: str

    def __str__(self) -> str:  # pragma: no cover
        return f"invalid_status_transition: {self.current} -> {self.target} ({self.message})"


@dataclass(frozen=True)
class InvalidHandoff(CheckoutError):
    from_role: str
    to_role: str

    def __str__(self) -> str:  # pragma: no cover
        return f"invalid_handoff: {self.from_role} -> {self.to_role} ({self.message})"


@dataclass(frozen=True)
class CartInactive(CheckoutError):
    session_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"cart_inactive: {self.session_id} ({self.message})"


@dataclass(frozen=True)
class PaymentDeclined(CheckoutError):
    reason: str

    def __str__(self) -> str:  # pragma: no cover
        return f"payment_declined: {self.reason} ({self.message})"


@dataclass(frozen=True)
class OrderHistoryUnavailable(CheckoutError):
    pass


@dataclass(frozen=True)
class PersistenceError(CheckoutError):
    pass


@dataclass(frozen=True)
class CartNotFound(PersistenceError):
    session_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"cart_not_found: {self.session_id} ({self.message})"


@dataclass(frozen=True)
class DraftNotFound(PersistenceError):
    session_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"draft_not_found: {self.session_id} ({self.message})"


@dataclass(frozen=True)
class OrderNotFound(PersistenceError):
    order_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"order_not_found: {self.order_id} ({self.message})"


@dataclass(frozen=True)
class PublishError(CheckoutError):
    pass


@dataclass(frozen=True)
class IdempotencyKeyConflict(CheckoutError):
    key: str

    def __str__(self) -> str:  # pragma: no cover
        return f"idempotency_key_conflict: {self.key} ({self.message})"
