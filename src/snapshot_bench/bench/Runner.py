"""Warm-up / measure loop for one (variant, action kind) pair."""

from __future__ import annotations

import gc
import logging
import time
from collections.abc import Callable

from snapshot_bench.bench.heap import HeapSync
from snapshot_bench.bench.Results import ResultsTable
from snapshot_bench.config import BenchConfig
from snapshot_bench.store.Action import ActionKind, State
from snapshot_bench.store.Store import Store
from snapshot_bench.strategies.variants import Variant
from snapshot_bench.workload.actions import ACTION_GENERATORS
from snapshot_bench.workload.state_shape import make_initial_state

logger = logging.getLogger(__name__)


class BenchmarkRunner:
    """Times one strategy variant on one action kind at a time.

    Usage:
        results = ResultsTable()
        runner = BenchmarkRunner(config, results, gc_heap_sync)
        runner.run(get_variant("Draft"), ActionKind.ADD)

    Each run builds a fresh state and Store, so runs never see each other's
    state. The measured duration is appended to the results table passed in.
    """

    _config: BenchConfig
    _results: ResultsTable
    _heap_sync: HeapSync
    _clock: Callable[[], float]
    _state_factory: Callable[[BenchConfig], State]

    def __init__(
        self,
        config: BenchConfig,
        results: ResultsTable,
        heap_sync: HeapSync,
        clock: Callable[[], float] = time.perf_counter,
        state_factory: Callable[[BenchConfig], State] = make_initial_state,
    ) -> None:
        self._config = config
        self._results = results
        self._heap_sync = heap_sync
        self._clock = clock
        self._state_factory = state_factory

    def make_store(self, variant: Variant) -> Store[State]:
        return Store(variant.build(self._config), self._state_factory(self._config))

    def run(
        self,
        variant: Variant,
        kind: ActionKind,
        warmup_count: int | None = None,
        measure_count: int | None = None,
    ) -> float:
        """Benchmark variant on kind and return milliseconds per operation.

        Warm-up dispatches indices 0..warmup_count-1; the measured phase
        restarts at index 0. A heap sync runs before and after measuring.
        """
        config = self._config
        warmup_count = config.warmup_count if warmup_count is None else warmup_count
        measure_count = config.measure_count if measure_count is None else measure_count
        if measure_count <= 0:
            raise ValueError(f"measure_count must be positive, got {measure_count}")

        generate = ACTION_GENERATORS[kind]
        store = self.make_store(variant)

        logger.debug("%s [%s]: warm-up x%d", kind.label, variant.label, warmup_count)
        for index in range(warmup_count):
            store.dispatch(generate(index, config))

        self._heap_sync()

        logger.debug("%s [%s]: measuring x%d", kind.label, variant.label, measure_count)
        gc_was_enabled = gc.isenabled()
        if config.disable_gc_during_measure:
            gc.disable()
        try:
            start = self._clock()
            for index in range(measure_count):
                store.dispatch(generate(index, config))
            end = self._clock()
        finally:
            if config.disable_gc_during_measure and gc_was_enabled:
                gc.enable()

        duration_ms = (end - start) * 1000 / measure_count
        logger.debug(
            "%s [%s]: %d dispatches in total", kind.label, variant.label, store.dispatch_count
        )

        # Drop the run's state before collecting so the next warm-up starts clean
        del store
        self._heap_sync()

        print(f"{kind.label} [{variant.label}]: {duration_ms:.3f} ms")
        self._results.record(kind.label, variant.label, duration_ms)
        return duration_ms
