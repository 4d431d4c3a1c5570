"""Full-copy update helpers shared by the copying strategies.

Each helper builds a new primary list and leaves its input untouched.
Untouched Records are carried over by reference.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from snapshot_bench.config import ShapeConfig
from snapshot_bench.store.Action import Record, UpdatePayload
from snapshot_bench.workload.state_shape import nest


def assoc_in(mapping: Mapping[str, Any], keys: tuple[str, ...], value: Any) -> dict[str, Any]:
    """Return a copy of mapping with value set at the key path.

    Only the mappings along the path are copied; missing or non-mapping
    intermediates are replaced by new dicts.
    """
    head, rest = keys[0], keys[1:]
    if rest:
        child = mapping.get(head)
        value = assoc_in(child, rest, value) if isinstance(child, Mapping) else nest(rest, value)
    return {**mapping, head: value}


def append_record(records: Sequence[Record], record: Record) -> list[Record]:
    return [*records, record]


def remove_at(records: Sequence[Record], index: int) -> list[Record] | None:
    """Drop the Record at index. Returns None for an out-of-range index."""
    if not 0 <= index < len(records):
        return None
    return [*records[:index], *records[index + 1 :]]


def find_index(records: Sequence[Record], id_field: str, target: Any) -> int:
    for index, record in enumerate(records):
        if record[id_field] == target:
            return index
    return -1


def update_first(
    records: Sequence[Record], shape: ShapeConfig, payload: UpdatePayload
) -> list[Record] | None:
    """Replace the first Record matching payload["id"].

    The replacement gets the new scalar value and nested scalar; its other
    fields and every other Record are shared with the input. Returns None
    when no Record matches.
    """
    index = find_index(records, shape.id_field, payload["id"])
    if index < 0:
        return None
    record = records[index]
    updated = assoc_in(record, shape.nested_scalar_keys, payload["nested_data"])
    updated[shape.value_field] = payload["value"]
    new_records = list(records)
    new_records[index] = updated
    return new_records


def concat_window(
    records: Sequence[Record], payload: Sequence[Record], window: int
) -> list[Record]:
    """Prepend payload and keep the first `window` Records."""
    keep = max(window - len(payload), 0)
    return [*payload[:window], *records[:keep]]
