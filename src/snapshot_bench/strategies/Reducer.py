from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from snapshot_bench.config import BenchConfig
from snapshot_bench.errors import ActionKindError
from snapshot_bench.store.Action import Action, ActionKind, State

P = TypeVar("P")


class Case(Generic[P]):
    """An update handler declared on a Reducer subclass for one action kind.

    P: The payload type
    """

    def __init__(self, kind: ActionKind, handler: Callable[..., Any]):
        self.kind = kind
        self.handler = handler

    def __call__(self, *args: Any) -> Any:
        # Only reached when accessed on the class directly (not via instance)
        raise RuntimeError(
            "Case must be used through a Reducer instance. "
            "Use reducer(state, action) instead of calling the handler."
        )


class Reducer:
    """Base class for update strategies.

    Subclasses declare one handler per action kind with `@Reducer.case(kind)`.
    Instances are callables `(state, action) -> state` suitable for a Store.

    Example:
        class AppendOnly(Reducer):
            @Reducer.case(ActionKind.ADD)
            def add(self, state, record):
                return {**state, "items": [*state["items"], record]}
    """

    _config: BenchConfig
    _cases: dict[ActionKind, Callable[[State, Any], State]]

    @staticmethod
    def case(kind: ActionKind) -> Callable[[Callable[..., Any]], Case[Any]]:
        """Decorator declaring the handler for one action kind."""

        def decorator(handler: Callable[..., Any]) -> Case[Any]:
            return Case(kind, handler)

        return decorator

    def __init__(self, config: BenchConfig):
        self._config = config
        self._cases = {}
        self._bind_cases()

    def _bind_cases(self) -> None:
        """Find all Case class attributes and bind them to this instance."""
        for name in dir(type(self)):
            if name.startswith("_"):
                continue
            attr = getattr(type(self), name)
            if isinstance(attr, Case):
                self._cases[attr.kind] = self._bind(attr.handler)

    def _bind(self, handler: Callable[..., Any]) -> Callable[[State, Any], State]:
        def bound(state: State, payload: Any) -> State:
            return handler(self, state, payload)

        return bound

    @property
    def kinds(self) -> frozenset[ActionKind]:
        return frozenset(self._cases)

    def prepare(self, state: State) -> State:
        """Hook applied once to the initial state when a Store is created."""
        return state

    def __call__(self, state: State, action: Action[Any]) -> State:
        try:
            handler = self._cases[action.kind]
        except KeyError:
            raise ActionKindError(
                f"{type(self).__name__} has no case for action kind {action.kind!r}"
            ) from None
        return handler(state, action.payload)
