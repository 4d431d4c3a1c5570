import pytest

from snapshot_bench.config import BenchConfig


@pytest.fixture
def small_config() -> BenchConfig:
    """A config small enough to build and benchmark in milliseconds."""
    return BenchConfig(
        size=20,
        secondary_size=5,
        children_size=3,
        warmup_count=2,
        measure_count=3,
        concat_batch_size=5,
        seed=7,
    )


@pytest.fixture(autouse=True)
def clear_bench_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in [
        "SNAPSHOT_BENCH_SIZE",
        "SNAPSHOT_BENCH_SECONDARY_SIZE",
        "SNAPSHOT_BENCH_CHILDREN_SIZE",
        "SNAPSHOT_BENCH_WARMUP_COUNT",
        "SNAPSHOT_BENCH_MEASURE_COUNT",
        "SNAPSHOT_BENCH_CONCAT_BATCH_SIZE",
        "SNAPSHOT_BENCH_SEED",
        "SNAPSHOT_BENCH_DISABLE_GC_DURING_MEASURE",
        "SNAPSHOT_BENCH_HEAP_SYNC",
        "SNAPSHOT_BENCH_ALLOW_NOOP_HEAP_SYNC",
    ]:
        monkeypatch.delenv(key, raising=False)
