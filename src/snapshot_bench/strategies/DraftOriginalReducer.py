"""Draft strategy that bypasses the draft and rebuilds from the original."""

from __future__ import annotations

from snapshot_bench.store.Action import ActionKind, Record, State, UpdatePayload
from snapshot_bench.store.draft import DraftDict, original
from snapshot_bench.strategies import copying
from snapshot_bench.strategies.DraftReducer import DraftReducer
from snapshot_bench.strategies.Reducer import Reducer


class DraftOriginalReducer(DraftReducer):
    """Runs inside a draft scope but never writes to the draft.

    Each handler reads the primary list through `original()`, builds the new
    list with full-copy logic, and returns the draft spread with that list in
    place. Spreading the draft creates a child draft per top-level key, and
    the draft engine resolves them (and freezes the new list when
    `auto_freeze` is on), which is the overhead this variant measures.
    Returning None leaves the state unchanged.
    """

    @Reducer.case(ActionKind.ADD)
    def add_item(self, draft: DraftDict, record: Record) -> State:
        key = self._config.shape.primary_key
        return {**draft, key: copying.append_record(original(draft)[key], record)}

    @Reducer.case(ActionKind.REMOVE)
    def remove_item(self, draft: DraftDict, index: int) -> State | None:
        key = self._config.shape.primary_key
        records = copying.remove_at(original(draft)[key], index)
        if records is None:
            return None
        return {**draft, key: records}

    @Reducer.case(ActionKind.UPDATE)
    def update_item(self, draft: DraftDict, payload: UpdatePayload) -> State | None:
        shape = self._config.shape
        records = copying.update_first(original(draft)[shape.primary_key], shape, payload)
        if records is None:
            return None
        return {**draft, shape.primary_key: records}

    @Reducer.case(ActionKind.CONCAT)
    def concat_array(self, draft: DraftDict, payload: list[Record]) -> State:
        key = self._config.shape.primary_key
        records = copying.concat_window(original(draft)[key], payload, self._config.size)
        return {**draft, key: records}
