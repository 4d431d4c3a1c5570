"""Benchmark configuration.

All tunables are compile-time style constants held in a frozen dataclass.
`load_config()` applies overrides from `SNAPSHOT_BENCH_*` environment
variables; there are no command-line flags and no config files.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Literal, TypeAlias

from snapshot_bench.errors import ConfigurationError

HeapSyncMode: TypeAlias = Literal["gc", "none"]

_ENV_PREFIX = "SNAPSHOT_BENCH_"
_HEAP_SYNC_MODES: frozenset[str] = frozenset({"gc", "none"})


def split_path(path: str) -> tuple[str, ...]:
    """Split a dotted path like "nested.data" into its keys."""
    keys = tuple(part for part in path.split(".") if part)
    if not keys:
        raise ConfigurationError(f"Empty field path: {path!r}")
    return keys


@dataclass(frozen=True, kw_only=True)
class ShapeConfig:
    """Field names and nested paths of the benchmarked state shape.

    Attributes:
        primary_key: Key of the primary Record sequence in the state.
        secondary_key: Key of the secondary sequence (never updated).
        id_field: Identifier field of a Record.
        value_field: Scalar value field of a Record.
        nested_key_path: Dotted path of the nested string key.
        nested_scalar_path: Dotted path of the nested scalar touched by update.
        children_path: Dotted path of the nested sub-object sequence.
    """

    primary_key: str = "large_array"
    secondary_key: str = "other_data"
    id_field: str = "id"
    value_field: str = "value"
    nested_key_path: str = "nested.key"
    nested_scalar_path: str = "nested.data"
    children_path: str = "more_nested.items"

    @property
    def nested_key_keys(self) -> tuple[str, ...]:
        return split_path(self.nested_key_path)

    @property
    def nested_scalar_keys(self) -> tuple[str, ...]:
        return split_path(self.nested_scalar_path)

    @property
    def children_keys(self) -> tuple[str, ...]:
        return split_path(self.children_path)


@dataclass(frozen=True, kw_only=True)
class BenchConfig:
    size: int = 10_000
    secondary_size: int = 10_000
    children_size: int = 100
    warmup_count: int = 100
    measure_count: int = 1_000
    concat_batch_size: int = 500
    seed: int | None = None
    disable_gc_during_measure: bool = False
    heap_sync: HeapSyncMode = "gc"
    allow_noop_heap_sync: bool = False
    shape: ShapeConfig = field(default_factory=ShapeConfig)

    def validate(self) -> BenchConfig:
        """Check the configuration and return it unchanged.

        Raises:
            ConfigurationError: If a size or count is out of range, the concat
                batch does not fit the window, or the heap sync mode is unknown.
        """
        for name in ("size", "children_size", "measure_count", "concat_batch_size"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("secondary_size", "warmup_count"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must not be negative, got {getattr(self, name)}")
        if self.concat_batch_size > self.size:
            raise ConfigurationError(
                f"concat_batch_size ({self.concat_batch_size}) must not exceed size ({self.size})"
            )
        if self.heap_sync not in _HEAP_SYNC_MODES:
            raise ConfigurationError(
                f"heap_sync must be one of {sorted(_HEAP_SYNC_MODES)}, got {self.heap_sync!r}"
            )
        shape = self.shape
        for path in (shape.nested_key_path, shape.nested_scalar_path, shape.children_path):
            split_path(path)
        return self

    def with_overrides(self, **changes: Any) -> BenchConfig:
        return replace(self, **changes)


DEFAULT_CONFIG = BenchConfig()


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_optional_int(value: Any, default: int | None) -> int | None:
    if value is None:
        return default
    if isinstance(value, str) and value.strip().lower() in {"", "none"}:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return default


def load_config(environ: Mapping[str, str] | None = None) -> BenchConfig:
    """Build a BenchConfig from defaults and SNAPSHOT_BENCH_* variables.

    Unparseable values fall back to the defaults. The result is not
    validated; call `validate()` before running benchmarks.
    """
    env = os.environ if environ is None else environ
    base = DEFAULT_CONFIG

    def get(name: str) -> str | None:
        return env.get(f"{_ENV_PREFIX}{name}")

    return BenchConfig(
        size=_to_int(get("SIZE"), base.size),
        secondary_size=_to_int(get("SECONDARY_SIZE"), base.secondary_size),
        children_size=_to_int(get("CHILDREN_SIZE"), base.children_size),
        warmup_count=_to_int(get("WARMUP_COUNT"), base.warmup_count),
        measure_count=_to_int(get("MEASURE_COUNT"), base.measure_count),
        concat_batch_size=_to_int(get("CONCAT_BATCH_SIZE"), base.concat_batch_size),
        seed=_to_optional_int(get("SEED"), base.seed),
        disable_gc_during_measure=_to_bool(
            get("DISABLE_GC_DURING_MEASURE"), base.disable_gc_during_measure
        ),
        heap_sync=(get("HEAP_SYNC") or base.heap_sync).strip().lower(),  # type: ignore[arg-type]
        allow_noop_heap_sync=_to_bool(get("ALLOW_NOOP_HEAP_SYNC"), base.allow_noop_heap_sync),
        shape=base.shape,
    )
