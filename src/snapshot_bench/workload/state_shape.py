"""Generator for the large nested benchmark state."""

from __future__ import annotations

import random
from typing import Any

from glom import assign

from snapshot_bench.config import BenchConfig
from snapshot_bench.store.Action import Record, State


def nest(keys: tuple[str, ...], value: Any) -> Any:
    """Build {k1: {k2: ... value}} from a key path."""
    for key in reversed(keys):
        value = {key: value}
    return value


def make_children(size: int) -> list[dict[str, Any]]:
    return [{"id": j, "name": str(j)} for j in range(size)]


def make_record(config: BenchConfig, index: int, value: float, nested_data: float) -> Record:
    """Build one full primary Record.

    Args:
        config: Supplies field names, nested paths and the children count
        index: Used for the identifier and the nested key
        value: Scalar value
        nested_data: Nested scalar value (the one update touches)
    """
    shape = config.shape
    record: Record = {shape.id_field: index, shape.value_field: value}
    assign(record, shape.nested_key_path, f"key-{index}", missing=dict)
    assign(record, shape.nested_scalar_path, nested_data, missing=dict)
    assign(record, shape.children_path, make_children(config.children_size), missing=dict)
    return record


def make_secondary_record(index: int) -> dict[str, Any]:
    return {"id": index, "name": f"name-{index}", "is_active": index % 2 == 0}


def make_initial_state(config: BenchConfig, rng: random.Random | None = None) -> State:
    """Build a fresh benchmark state.

    The shape is identical on every call. Scalar values are pseudo-random, so
    they differ between calls unless `config.seed` or `rng` pins them.

    Args:
        config: Sizes and field names of the state
        rng: Random source for the scalar values; defaults to one seeded with
            `config.seed`

    Returns:
        A plain dict holding `config.size` primary Records and
        `config.secondary_size` secondary Records
    """
    rng = rng or random.Random(config.seed)
    shape = config.shape
    return {
        shape.primary_key: [
            make_record(config, i, rng.random(), rng.random()) for i in range(config.size)
        ],
        shape.secondary_key: [make_secondary_record(i) for i in range(config.secondary_size)],
    }
