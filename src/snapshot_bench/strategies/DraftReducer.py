"""Structural-sharing strategy: mutate a draft, finalize a new snapshot."""

from __future__ import annotations

from collections.abc import Callable, MutableMapping
from typing import Any

from pyrsistent import freeze

from snapshot_bench.config import BenchConfig
from snapshot_bench.store.Action import ActionKind, Record, State, UpdatePayload
from snapshot_bench.store.draft import DraftDict, DraftList, produce
from snapshot_bench.strategies.Reducer import Reducer
from snapshot_bench.workload.state_shape import nest


def set_in(node: MutableMapping[str, Any], keys: tuple[str, ...], value: Any) -> None:
    """Assign value at the key path, creating missing intermediate dicts."""
    *parents, last = keys
    for depth, key in enumerate(parents):
        child = node.get(key)
        if not isinstance(child, MutableMapping):
            node[key] = nest(keys[depth + 1 :], value)
            return
        node = child
    node[last] = value


class DraftReducer(Reducer):
    """Handlers write to a draft as if the state were mutable.

    Each handler receives a DraftDict and returns None; the draft is then
    finalized so that only the touched paths are copied. With `auto_freeze`
    the initial state is converted once in `prepare()` to pyrsistent `PMap` /
    `PVector` containers and every snapshot stays persistent, so accidental
    mutation raises TypeError.
    """

    auto_freeze: bool

    def __init__(self, config: BenchConfig, auto_freeze: bool = True):
        self.auto_freeze = auto_freeze
        super().__init__(config)

    def _bind(self, handler: Callable[..., Any]) -> Callable[[State, Any], State]:
        def bound(state: State, payload: Any) -> State:
            return produce(state, lambda draft: handler(self, draft, payload), self.auto_freeze)

        return bound

    def prepare(self, state: State) -> State:
        return freeze(state) if self.auto_freeze else state

    def _records(self, draft: DraftDict) -> DraftList:
        return draft[self._config.shape.primary_key]

    @Reducer.case(ActionKind.ADD)
    def add_item(self, draft: DraftDict, record: Record) -> None:
        self._records(draft).append(record)

    @Reducer.case(ActionKind.REMOVE)
    def remove_item(self, draft: DraftDict, index: int) -> None:
        records = self._records(draft)
        if 0 <= index < len(records):
            del records[index]

    @Reducer.case(ActionKind.UPDATE)
    def update_item(self, draft: DraftDict, payload: UpdatePayload) -> None:
        shape = self._config.shape
        for item in self._records(draft):
            if item[shape.id_field] == payload["id"]:
                item[shape.value_field] = payload["value"]
                set_in(item, shape.nested_scalar_keys, payload["nested_data"])
                return

    @Reducer.case(ActionKind.CONCAT)
    def concat_array(self, draft: DraftDict, payload: list[Record]) -> None:
        records = self._records(draft)
        records[:0] = payload
        del records[self._config.size :]
