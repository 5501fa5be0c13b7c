from __future__ import annotations

import copy
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from service_config.json_tree import JsonNode

V = TypeVar("V")

# Builds one policy value from a whole methodConfig entry; None or ValueError means rejected.
ValueFactory = Callable[[JsonNode], "V | None"]


@dataclass(frozen=True, slots=True)
class ValueVTable(Generic[V]):
    # Copy/destroy capability pair for an opaque policy value type.
    copy: Callable[[V], V]
    destroy: Callable[[V], None]


def _identity(value: V) -> V:
    return value


def _discard(value: object) -> None:
    _ = value


# Immutable values can be shared between paths.
SHARED_VTABLE: ValueVTable[object] = ValueVTable(copy=_identity, destroy=_discard)

# Mutable values get an independent replica per path.
DEEPCOPY_VTABLE: ValueVTable[object] = ValueVTable(copy=copy.deepcopy, destroy=_discard)
