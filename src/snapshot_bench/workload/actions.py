"""Deterministic generators for the four canonical actions.

Every payload is derived from the iteration index alone, so two strategies
run over the same index receive identical payloads.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeAlias

from snapshot_bench.config import DEFAULT_CONFIG, BenchConfig
from snapshot_bench.store.Action import Action, ActionKind, Record, UpdatePayload
from snapshot_bench.workload.state_shape import nest

ActionGenerator: TypeAlias = Callable[[int, BenchConfig], Action[Any]]


def add_item(index: int, config: BenchConfig = DEFAULT_CONFIG) -> Action[Record]:
    shape = config.shape
    keys = shape.nested_scalar_keys
    record: Record = {shape.id_field: index, shape.value_field: index}
    record[keys[0]] = nest(keys[1:], index)
    return Action(ActionKind.ADD, record)


def remove_item(index: int, config: BenchConfig = DEFAULT_CONFIG) -> Action[int]:
    return Action(ActionKind.REMOVE, index)


def update_item(index: int, config: BenchConfig = DEFAULT_CONFIG) -> Action[UpdatePayload]:
    return Action(ActionKind.UPDATE, UpdatePayload(id=index, value=index, nested_data=index))


def concat_array(index: int, config: BenchConfig = DEFAULT_CONFIG) -> Action[list[Record]]:
    """Build a concat action carrying exactly `concat_batch_size` minimal Records."""
    shape = config.shape
    payload = [
        {shape.id_field: i, shape.value_field: index} for i in range(config.concat_batch_size)
    ]
    return Action(ActionKind.CONCAT, payload)


ACTION_GENERATORS: dict[ActionKind, ActionGenerator] = {
    ActionKind.ADD: add_item,
    ActionKind.REMOVE: remove_item,
    ActionKind.UPDATE: update_item,
    ActionKind.CONCAT: concat_array,
}
