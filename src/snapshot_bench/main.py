"""Entry point: run every (action kind x variant) benchmark and print results."""

from __future__ import annotations

import logging
import sys

from snapshot_bench.bench.heap import resolve_heap_sync
from snapshot_bench.bench.Suite import BenchmarkSuite
from snapshot_bench.config import BenchConfig, load_config
from snapshot_bench.errors import ConfigurationError

logger = logging.getLogger(__name__)

EXIT_CONFIGURATION_ERROR = 2


def main(config: BenchConfig | None = None) -> int:
    """Run the full benchmark matrix.

    Args:
        config: Benchmark configuration; loaded from SNAPSHOT_BENCH_*
            environment variables when omitted

    Returns:
        0 on completion, EXIT_CONFIGURATION_ERROR if the configuration is
        invalid or explicit garbage collection is unavailable
    """
    try:
        config = (config or load_config()).validate()
        heap_sync = resolve_heap_sync(config)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return EXIT_CONFIGURATION_ERROR

    suite = BenchmarkSuite(config, heap_sync)

    print("Starting benchmarks...")
    results = suite.run()

    print()
    print(results.render_table())
    print()
    print(f"Slow-down relative to {suite.baseline.label}:")
    print()
    print(results.render_markdown(suite.baseline.label))
    return 0


def run() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    sys.exit(main())


if __name__ == "__main__":
    run()
