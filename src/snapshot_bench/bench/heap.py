"""Heap synchronization between benchmark phases.

The runner calls a HeapSync before and after every measured phase so that
each measurement starts from a comparable heap. The default is a full
`gc.collect()`; a no-op stand-in exists only for hosts without a usable
collector and must be allowed explicitly.
"""

from __future__ import annotations

import gc
import logging
from types import ModuleType
from typing import Protocol

from snapshot_bench.config import BenchConfig
from snapshot_bench.errors import ConfigurationError

logger = logging.getLogger(__name__)


class HeapSync(Protocol):
    def __call__(self) -> None: ...


def gc_heap_sync() -> None:
    gc.collect()


def noop_heap_sync() -> None:
    pass


def resolve_heap_sync(config: BenchConfig, gc_module: ModuleType | None = None) -> HeapSync:
    """Pick the heap synchronization primitive for this host.

    Args:
        config: Selects "gc" or "none" and whether "none" is permitted
        gc_module: Module expected to provide `collect()`; defaults to `gc`

    Raises:
        ConfigurationError: If the collector is unavailable, or the no-op
            stand-in was requested without `allow_noop_heap_sync`
    """
    if config.heap_sync == "none":
        if not config.allow_noop_heap_sync:
            raise ConfigurationError(
                "heap_sync='none' requires allow_noop_heap_sync=True; "
                "skipping collection makes runs incomparable"
            )
        logger.warning("Using no-op heap sync; cross-run comparability may degrade")
        return noop_heap_sync

    module = gc if gc_module is None else gc_module
    collect = getattr(module, "collect", None)
    if not callable(collect):
        raise ConfigurationError(
            f"Explicit garbage collection is unavailable: {module.__name__}.collect is missing"
        )
    if module is gc:
        return gc_heap_sync

    def sync() -> None:
        collect()

    return sync
