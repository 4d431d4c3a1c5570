from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, Protocol, TypeVar

from snapshot_bench.store.Action import Action

S = TypeVar("S")


class Reducer(Protocol[S]):
    """Pure update function (state, action) -> new state."""

    def __call__(self, state: S, action: Action[Any], /) -> S: ...


class Store(Generic[S]):
    """Minimal dispatch shell binding one reducer to a running state.

    If the reducer has a `prepare(state)` hook it is applied to the initial
    state once, when the store is created (e.g. to convert it to persistent containers).
    """

    _state: S
    _reducer: Reducer[S]
    _dispatch_count: int

    def __init__(self, reducer: Reducer[S], initial_state: S):
        self._reducer = reducer
        prepare: Callable[[S], S] | None = getattr(reducer, "prepare", None)
        self._state = prepare(initial_state) if prepare is not None else initial_state
        self._dispatch_count = 0

    def dispatch(self, action: Action[Any]) -> S:
        """Run the reducer and replace the current state with its result."""
        self._state = self._reducer(self._state, action)
        self._dispatch_count += 1
        return self._state

    @property
    def dispatch_count(self) -> int:
        return self._dispatch_count

    def get(self) -> S:
        return self._state
