"""Tests for BenchmarkRunner and BenchmarkSuite."""

import gc
from collections.abc import Callable, Iterator
from typing import Any

import pytest

from snapshot_bench.bench.heap import noop_heap_sync
from snapshot_bench.bench.Results import ResultsTable
from snapshot_bench.bench.Runner import BenchmarkRunner
from snapshot_bench.bench.Suite import BenchmarkSuite
from snapshot_bench.config import BenchConfig
from snapshot_bench.store.Action import ActionKind
from snapshot_bench.strategies.FullCopyReducer import FullCopyReducer
from snapshot_bench.strategies.Reducer import Reducer
from snapshot_bench.strategies.variants import FULL_COPY, VARIANTS, Variant, get_variant


def fake_clock(*ticks: float) -> Callable[[], float]:
    it: Iterator[float] = iter(ticks)
    return lambda: next(it)


class AddOnlyReducer(Reducer):
    add_item = FullCopyReducer.add_item


class CountingHeapSync:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


class TestRunner:
    """Tests for BenchmarkRunner.run()"""

    def test_duration_is_per_operation_ms(
        self, small_config: BenchConfig, capsys: pytest.CaptureFixture[str]
    ) -> None:
        results = ResultsTable()
        runner = BenchmarkRunner(
            small_config, results, noop_heap_sync, clock=fake_clock(1.0, 1.006)
        )

        duration = runner.run(get_variant("Draft"), ActionKind.ADD)

        # 6 ms over measure_count=3 operations
        assert duration == pytest.approx(2.0)
        assert results.as_mapping() == {"Add Item": {"Draft": pytest.approx(2.0)}}
        assert capsys.readouterr().out.strip() == "Add Item [Draft]: 2.000 ms"

    def test_heap_sync_before_and_after_measuring(self, small_config: BenchConfig) -> None:
        heap_sync = CountingHeapSync()
        runner = BenchmarkRunner(small_config, ResultsTable(), heap_sync)

        runner.run(FULL_COPY, ActionKind.CONCAT)

        assert heap_sync.calls == 2

    def test_dispatch_count(self, small_config: BenchConfig) -> None:
        stores = []

        class TrackingRunner(BenchmarkRunner):
            def make_store(self, variant: Variant) -> Any:
                store = super().make_store(variant)
                stores.append(store)
                return store

        runner = TrackingRunner(small_config, ResultsTable(), noop_heap_sync)
        runner.run(FULL_COPY, ActionKind.UPDATE, warmup_count=4, measure_count=5)

        assert len(stores) == 1
        assert stores[0].dispatch_count == 9

    def test_each_run_uses_fresh_state(self, small_config: BenchConfig) -> None:
        built: list[BenchConfig] = []

        def factory(config: BenchConfig) -> dict[str, Any]:
            built.append(config)
            return {"large_array": [], "other_data": []}

        runner = BenchmarkRunner(
            small_config, ResultsTable(), noop_heap_sync, state_factory=factory
        )
        runner.run(FULL_COPY, ActionKind.ADD)
        runner.run(FULL_COPY, ActionKind.ADD)

        assert built == [small_config, small_config]

    def test_rejects_non_positive_measure_count(self, small_config: BenchConfig) -> None:
        runner = BenchmarkRunner(small_config, ResultsTable(), noop_heap_sync)

        with pytest.raises(ValueError):
            runner.run(FULL_COPY, ActionKind.ADD, measure_count=0)

    def test_gc_disabled_only_while_measuring(self, small_config: BenchConfig) -> None:
        config = small_config.with_overrides(disable_gc_during_measure=True)
        seen: list[bool] = []

        def clock() -> float:
            seen.append(gc.isenabled())
            return 0.0

        assert gc.isenabled()
        BenchmarkRunner(config, ResultsTable(), noop_heap_sync, clock=clock).run(
            FULL_COPY, ActionKind.REMOVE
        )

        assert seen == [False, False]
        assert gc.isenabled()

    def test_gc_restored_when_dispatch_fails(self, small_config: BenchConfig) -> None:
        config = small_config.with_overrides(disable_gc_during_measure=True)

        def broken_factory(config: BenchConfig) -> dict[str, Any]:
            return {}

        runner = BenchmarkRunner(
            config, ResultsTable(), noop_heap_sync, state_factory=broken_factory
        )

        with pytest.raises(KeyError):
            runner.run(FULL_COPY, ActionKind.ADD, warmup_count=0)
        assert gc.isenabled()


class TestSuite:
    """Tests for BenchmarkSuite"""

    def test_runs_kind_major_matrix(
        self, small_config: BenchConfig, capsys: pytest.CaptureFixture[str]
    ) -> None:
        results = BenchmarkSuite(small_config, noop_heap_sync).run()

        assert len(results) == len(ActionKind) * len(VARIANTS)
        assert results.kinds == [kind.label for kind in ActionKind]
        assert results.variants == [variant.label for variant in VARIANTS]
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("Add Item [Full Copy]: ")
        assert lines[1].startswith("Add Item [Draft]: ")
        assert lines[len(VARIANTS)].startswith("Remove Item [Full Copy]: ")

    def test_each_run_starts_a_new_table(self, small_config: BenchConfig) -> None:
        suite = BenchmarkSuite(small_config, noop_heap_sync, kinds=[ActionKind.ADD])

        assert suite.run() is not suite.run()

    def test_requires_single_baseline(self, small_config: BenchConfig) -> None:
        with pytest.raises(ValueError):
            BenchmarkSuite(small_config, noop_heap_sync, variants=VARIANTS[1:])
        with pytest.raises(ValueError):
            BenchmarkSuite(small_config, noop_heap_sync, variants=[FULL_COPY, FULL_COPY])

    def test_baseline_is_full_copy(self, small_config: BenchConfig) -> None:
        assert BenchmarkSuite(small_config, noop_heap_sync).baseline is FULL_COPY

    def test_rejects_variant_missing_a_kind(self, small_config: BenchConfig) -> None:
        add_only = Variant("Add Only", AddOnlyReducer)

        with pytest.raises(ValueError, match="Add Only"):
            BenchmarkSuite(small_config, noop_heap_sync, variants=[FULL_COPY, add_only])
        # Restricting the kinds to the ones it handles is fine
        BenchmarkSuite(
            small_config, noop_heap_sync, variants=[FULL_COPY, add_only], kinds=[ActionKind.ADD]
        )
