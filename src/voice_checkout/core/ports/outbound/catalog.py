from __future__ import annotations

from typing import Protocol, Sequence

from returns.result import Result

from voice_checkout.core.domain.model.errors import CheckoutError
from voice_checkout.core.domain.model.menu import MenuEntry


class MenuCatalog(Protocol):
    def lookup(self, name: str) -> Result[MenuEntry, CheckoutError]: ...

    def entries(self) -> Sequence[MenuEntry]: ...
