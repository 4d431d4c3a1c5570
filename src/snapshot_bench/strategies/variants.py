"""The benchmarked strategy variants, in run order."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from snapshot_bench.config import BenchConfig
from snapshot_bench.strategies.DraftOriginalReducer import DraftOriginalReducer
from snapshot_bench.strategies.DraftReducer import DraftReducer
from snapshot_bench.strategies.FullCopyReducer import FullCopyReducer
from snapshot_bench.strategies.Reducer import Reducer


@dataclass(frozen=True)
class Variant:
    """A labelled way of building a reducer for one benchmark run.

    Attributes:
        label: Name shown in benchmark output and result tables
        factory: Builds a fresh reducer from the benchmark config
        baseline: Whether other variants are normalized against this one
    """

    label: str
    factory: Callable[[BenchConfig], Reducer]
    baseline: bool = False

    def build(self, config: BenchConfig) -> Reducer:
        return self.factory(config)


FULL_COPY = Variant("Full Copy", FullCopyReducer, baseline=True)

VARIANTS: tuple[Variant, ...] = (
    FULL_COPY,
    Variant("Draft", lambda config: DraftReducer(config, auto_freeze=True)),
    Variant("Draft NoAutoFreeze", lambda config: DraftReducer(config, auto_freeze=False)),
    Variant("Draft Original", lambda config: DraftOriginalReducer(config, auto_freeze=True)),
    Variant(
        "Draft Original NoAutoFreeze",
        lambda config: DraftOriginalReducer(config, auto_freeze=False),
    ),
)

BASELINE_LABEL = FULL_COPY.label


def get_variant(label: str) -> Variant:
    for variant in VARIANTS:
        if variant.label == label:
            return variant
    raise KeyError(f"Unknown variant '{label}'")
