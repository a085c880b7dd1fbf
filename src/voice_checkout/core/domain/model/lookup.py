from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping, TypeVar

K = TypeVar("K", bound=Enum)
V = TypeVar("V")


def exhaustive(keys: type[K], table: Mapping[K, V]) -> Mapping[K, V]:
    """Freeze ``table`` after checking it covers exactly the members of ``keys``."""
    missing = [k.value for k in keys if k not in table]
    unknown = [k for k in table if not isinstance(k, keys)]
    if missing or unknown:
        raise LookupError(
            f"{keys.__name__} table mismatch: missing={missing} unknown={unknown}"
        )
    return MappingProxyType(dict(table))
