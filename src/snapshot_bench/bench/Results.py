"""Aggregation of timing samples into tables."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class TimingSample:
    kind: str
    variant: str
    duration_ms: float


def _ratio(duration: float, baseline: float) -> float:
    if baseline == 0:
        return 1.0 if duration == 0 else math.inf
    return round(duration / baseline, 1)


class ResultsTable:
    """Per-(action kind, variant) durations for one suite run.

    Kinds and variants keep the order in which they were first recorded.
    Recording the same pair twice replaces the earlier sample.
    """

    _durations: dict[str, dict[str, float]]
    _variants: list[str]

    def __init__(self) -> None:
        self._durations = {}
        self._variants = []

    def record(self, kind: str, variant: str, duration_ms: float) -> TimingSample:
        self._durations.setdefault(kind, {})[variant] = duration_ms
        if variant not in self._variants:
            self._variants.append(variant)
        return TimingSample(kind, variant, duration_ms)

    def __len__(self) -> int:
        return sum(len(row) for row in self._durations.values())

    @property
    def kinds(self) -> list[str]:
        return list(self._durations)

    @property
    def variants(self) -> list[str]:
        return list(self._variants)

    def as_mapping(self) -> dict[str, dict[str, float]]:
        return {kind: dict(row) for kind, row in self._durations.items()}

    def relative(self, baseline: str) -> dict[str, dict[str, float]]:
        """Slow-down factor of every variant against the baseline, per kind.

        Each duration is divided by the baseline's duration for the same kind
        and rounded to one decimal. The baseline itself is always 1.0.

        Raises:
            KeyError: If a kind has no sample for the baseline variant
        """
        relative: dict[str, dict[str, float]] = {}
        for kind, row in self._durations.items():
            if baseline not in row:
                raise KeyError(f"No '{baseline}' sample for '{kind}'")
            base = row[baseline]
            relative[kind] = {
                variant: 1.0 if variant == baseline else _ratio(duration, base)
                for variant, duration in row.items()
            }
        return relative

    def render_table(self) -> str:
        """Aligned text dump of the raw durations (ms per operation)."""
        variants = self.variants
        kind_width = max([len("(kind)"), *(len(kind) for kind in self._durations)])
        widths = [max(len(v), 10) for v in variants]
        header = "  ".join(
            [f"{'(kind)':<{kind_width}}", *(f"{v:>{w}}" for v, w in zip(variants, widths))]
        )
        lines = [header, "-" * len(header)]
        for kind, row in self._durations.items():
            cells = [
                f"{row[v]:>{w}.3f}" if v in row else " " * w for v, w in zip(variants, widths)
            ]
            lines.append("  ".join([f"{kind:<{kind_width}}", *cells]))
        return "\n".join(lines)

    def render_markdown(self, baseline: str) -> str:
        """Markdown table of slow-down factors, one row per kind."""
        relative = self.relative(baseline)
        variants = self.variants
        lines = [
            "| Action | " + " | ".join(variants) + " |",
            "|---|" + "---|" * len(variants),
        ]
        for kind, row in relative.items():
            cells = [f"{row[v]:.1f}" if v in row else "" for v in variants]
            lines.append(f"| {kind} | " + " | ".join(cells) + " |")
        return "\n".join(lines)
