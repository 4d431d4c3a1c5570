"""Error taxonomy for the benchmark harness."""

from __future__ import annotations


class BenchError(Exception):
    """Base class for all harness exceptions."""


class ConfigurationError(BenchError):
    """Raised before any benchmark runs when the harness cannot be set up.

    Covers invalid configuration values and a missing heap-synchronization
    primitive.
    """


class ActionKindError(BenchError):
    """Raised when a reducer receives an action kind it has no case for."""


class DraftError(BenchError):
    """Raised when the draft protocol is misused."""


class StrategyDivergenceError(BenchError, AssertionError):
    """Raised when two strategies produce different observable states."""

    def __init__(self, explanation: str, diff: object = None):
        self.diff = diff
        super().__init__(explanation)
