"""Observable-content comparison between snapshots.

Strategies differ in how much they copy and share, and the draft variants
return pyrsistent containers, so snapshots are compared after `thaw()`.
"""

from __future__ import annotations

from typing import Any

from deepdiff import DeepDiff
from glom import Coalesce, glom
from pyrsistent import thaw

from snapshot_bench.config import ShapeConfig
from snapshot_bench.errors import StrategyDivergenceError


def observe(state: Any, shape: ShapeConfig | None = None) -> list[dict[str, Any]]:
    """Project the observable content of the primary Records, in order.

    Returns one `{"id", "value", "nested"}` dict per Record, where `nested` is
    the nested scalar touched by update (None if the Record has no nested
    object).
    """
    shape = shape or ShapeConfig()
    projection = (
        shape.primary_key,
        [
            {
                "id": shape.id_field,
                "value": Coalesce(shape.value_field, default=None),
                "nested": Coalesce(shape.nested_scalar_path, default=None),
            }
        ],
    )
    return glom(thaw(state), projection)


def state_diff(expected: Any, actual: Any) -> DeepDiff:
    """Deep difference between two snapshots, ignoring persistent vs plain types."""
    return DeepDiff(thaw(expected), thaw(actual))


def assert_equivalent(expected: Any, actual: Any, label: str = "") -> None:
    """Raise StrategyDivergenceError if the two snapshots differ.

    Args:
        expected: Snapshot produced by the reference strategy
        actual: Snapshot produced by the strategy under test
        label: Optional name of the strategy under test, for the message
    """
    diff = state_diff(expected, actual)
    if diff:
        prefix = f"{label}: " if label else ""
        raise StrategyDivergenceError(f"{prefix}snapshots diverge: {diff.pretty()}", diff)
