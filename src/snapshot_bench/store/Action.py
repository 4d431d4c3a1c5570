from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeAlias, TypedDict, TypeVar

Record: TypeAlias = dict[str, Any]
State: TypeAlias = dict[str, Any]

P = TypeVar("P")


class ActionKind(StrEnum):
    """The four canonical update operations, in benchmark order."""

    ADD = "add"
    REMOVE = "remove"
    UPDATE = "update"
    CONCAT = "concat"

    @property
    def label(self) -> str:
        """Human-readable name used in benchmark output."""
        return _KIND_LABELS[self]


_KIND_LABELS: dict[ActionKind, str] = {
    ActionKind.ADD: "Add Item",
    ActionKind.REMOVE: "Remove Item",
    ActionKind.UPDATE: "Update Item",
    ActionKind.CONCAT: "Concat Array",
}


class UpdatePayload(TypedDict):
    """Payload for the update action."""

    id: int
    value: float
    nested_data: float


@dataclass(frozen=True)
class Action(Generic[P]):
    """A tagged update descriptor dispatched to a Store.

    P: The payload type

    Payloads by kind:
        add: a single new Record
        remove: the position to delete
        update: an UpdatePayload
        concat: a list of new minimal Records
    """

    kind: ActionKind
    payload: P
