"""Runs the full (action kind x variant) matrix in a fixed order."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from snapshot_bench.bench.heap import HeapSync
from snapshot_bench.bench.Results import ResultsTable
from snapshot_bench.bench.Runner import BenchmarkRunner
from snapshot_bench.config import BenchConfig
from snapshot_bench.store.Action import ActionKind
from snapshot_bench.strategies.variants import VARIANTS, Variant

logger = logging.getLogger(__name__)


class BenchmarkSuite:
    """One benchmark session.

    Every `run()` starts a new ResultsTable, runs each kind against every
    variant (kind-major), and returns the table.
    """

    _config: BenchConfig
    _heap_sync: HeapSync
    _variants: tuple[Variant, ...]
    _kinds: tuple[ActionKind, ...]

    def __init__(
        self,
        config: BenchConfig,
        heap_sync: HeapSync,
        variants: Sequence[Variant] = VARIANTS,
        kinds: Sequence[ActionKind] = tuple(ActionKind),
    ) -> None:
        baselines = [variant for variant in variants if variant.baseline]
        if len(baselines) != 1:
            raise ValueError(f"Expected exactly one baseline variant, got {len(baselines)}")
        for variant in variants:
            missing = set(kinds) - variant.build(config).kinds
            if missing:
                names = ", ".join(sorted(kind.label for kind in missing))
                raise ValueError(f"Variant '{variant.label}' has no case for: {names}")
        self._config = config
        self._heap_sync = heap_sync
        self._variants = tuple(variants)
        self._kinds = tuple(kinds)

    @property
    def baseline(self) -> Variant:
        return next(variant for variant in self._variants if variant.baseline)

    def run(self) -> ResultsTable:
        results = ResultsTable()
        runner = BenchmarkRunner(self._config, results, self._heap_sync)
        for kind in self._kinds:
            for variant in self._variants:
                runner.run(variant, kind)
        logger.debug("Suite finished with %d samples", len(results))
        return results
