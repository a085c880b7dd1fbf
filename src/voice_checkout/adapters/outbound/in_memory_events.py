from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

from returns.result import Failure, Result, Success

from voice_checkout.core.domain.model.errors import CheckoutError
from voice_checkout.core.ports.outbound.events import CheckoutEvent, EventPublisher

Subscriber = Callable[[CheckoutEvent], None]


@dataclass
class InMemoryEventBus(EventPublisher):
    """Keeps every published event and forwards it to subscribers in order."""

    published: list[CheckoutEvent] = field(default_factory=list)
    _subscribers: list[Subscriber] = field(default_factory=list)

    def subscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.append(subscriber)

    def publish(self, event: CheckoutEvent) -> Result[None, CheckoutError]:
        self.published.append(event)
        for sub in self._subscribers:
            sub(event)
        return Success(None)

    def of_type(self, kind: type) -> list[CheckoutEvent]:
        return [e for e in self.published if isinstance(e, kind)]


@dataclass
class FanOutEventPublisher(EventPublisher):
    """Publishes to every sink in order; stops at the first failure."""

    sinks: Sequence[EventPublisher]

    def publish(self, event: CheckoutEvent) -> Result[None, CheckoutError]:
        for sink in self.sinks:
            result = sink.publish(event)
            if isinstance(result, Failure):
                return result
        return Success(None)
