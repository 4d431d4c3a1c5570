"""Baseline strategy: rebuild the top-level state and the primary list."""

from __future__ import annotations

from snapshot_bench.store.Action import ActionKind, Record, State, UpdatePayload
from snapshot_bench.strategies import copying
from snapshot_bench.strategies.Reducer import Reducer


class FullCopyReducer(Reducer):
    """Every handler returns a new state mapping holding a new primary list.

    Out-of-range removes and updates for unknown ids return the input state.
    """

    @Reducer.case(ActionKind.ADD)
    def add_item(self, state: State, record: Record) -> State:
        key = self._config.shape.primary_key
        return {**state, key: copying.append_record(state[key], record)}

    @Reducer.case(ActionKind.REMOVE)
    def remove_item(self, state: State, index: int) -> State:
        key = self._config.shape.primary_key
        records = copying.remove_at(state[key], index)
        if records is None:
            return state
        return {**state, key: records}

    @Reducer.case(ActionKind.UPDATE)
    def update_item(self, state: State, payload: UpdatePayload) -> State:
        shape = self._config.shape
        records = copying.update_first(state[shape.primary_key], shape, payload)
        if records is None:
            return state
        return {**state, shape.primary_key: records}

    @Reducer.case(ActionKind.CONCAT)
    def concat_array(self, state: State, payload: list[Record]) -> State:
        key = self._config.shape.primary_key
        return {**state, key: copying.concat_window(state[key], payload, self._config.size)}
