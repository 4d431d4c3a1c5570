"""Draft protocol over pyrsistent evolvers.

A draft is a mutable view over a nested state whose containers are plain
dicts and lists or pyrsistent `PMap` / `PVector`. Reads go straight to the
base. The first write to a container opens an evolver on it (a plain
container is first converted shallowly), so all writes to one container are
batched into a single new persistent value. Child drafts are created lazily
on read and committed into their parent on finalize; untouched subtrees stay
shared with the base.

Protocol:
    draft = begin_draft(state, auto_freeze=True)
    draft["large_array"].append(record)
    new_state = finalize(draft)

or, equivalently, `produce(state, recipe, auto_freeze=True)`.

With `auto_freeze` every value written into a draft is deep-frozen with
`pyrsistent.freeze`, so snapshots only ever hold persistent containers.
After finalization the scope is revoked and any further access raises
`DraftError`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, MutableMapping, MutableSequence
from typing import Any, TypeVar, cast

from pyrsistent import PMap, PVector, freeze, pmap, pvector

from snapshot_bench.errors import DraftError

S = TypeVar("S")

_UNSET: Any = object()
_DRAFTABLE = (dict, list, PMap, PVector)


class _Scope:
    """Bookkeeping shared by all drafts of one produce call."""

    __slots__ = ("auto_freeze", "modified", "revoked", "root")

    def __init__(self, auto_freeze: bool) -> None:
        self.auto_freeze = auto_freeze
        self.modified = False
        self.revoked = False
        self.root: Draft | None = None


def _persistent(value: Any) -> Any:
    if isinstance(value, dict):
        return pmap(value)
    if isinstance(value, list):
        return pvector(value)
    return value


class Draft:
    """Shared machinery for DraftDict and DraftList."""

    __slots__ = ("_base", "_evolver", "_children", "_scope", "_dirty", "_result")

    _base: Any
    _evolver: Any
    _children: dict[Any, Draft]
    _scope: _Scope
    _dirty: bool
    _result: Any

    def __init__(self, base: Any, scope: _Scope) -> None:
        self._base = base
        self._evolver = None
        self._children = {}
        self._scope = scope
        self._dirty = False
        self._result = _UNSET

    @property
    def modified(self) -> bool:
        return self._dirty or any(child.modified for child in self._children.values())

    def _check(self) -> None:
        if self._scope.revoked or self._result is not _UNSET:
            raise DraftError(
                "Cannot use a draft after it has been finalized. "
                "Did you keep a reference to it outside the update recipe?"
            )

    def _source(self) -> Any:
        return self._base if self._evolver is None else self._evolver

    def _current(self) -> Any:
        return self._base if self._evolver is None else self._evolver.persistent()

    def _writable(self) -> Any:
        if self._evolver is None:
            self._evolver = _persistent(self._base).evolver()
        self._dirty = True
        self._scope.modified = True
        return self._evolver

    def _read(self, key: Any) -> Any:
        self._check()
        child = self._children.get(key)
        if child is not None:
            return child
        value = self._source()[key]
        if isinstance(value, _DRAFTABLE):
            child = _draft_for(value, self._scope)
            self._children[key] = child
            return child
        return value

    def _store(self, value: Any) -> Any:
        if isinstance(value, Draft):
            raise DraftError("Cannot store a draft inside a draft; store original(draft) instead")
        return freeze(value, strict=False) if self._scope.auto_freeze else value

    def _drop_child(self, key: Any) -> None:
        child = self._children.pop(key, None)
        if child is not None:
            _finalize_draft(child)

    def _commit_children(self) -> None:
        children, self._children = self._children, {}
        for key, child in children.items():
            result = _finalize_draft(child)
            if result is not child._base:
                self._writable()[key] = result


class DraftDict(Draft, MutableMapping[str, Any]):
    """Draft over a dict or PMap."""

    __slots__ = ()

    def __getitem__(self, key: str) -> Any:
        return self._read(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self._check()
        try:
            if self._source()[key] is value:
                return
        except KeyError:
            pass
        self._drop_child(key)
        self._writable()[key] = self._store(value)

    def __delitem__(self, key: str) -> None:
        self._check()
        if key not in self._current():
            raise KeyError(key)
        self._drop_child(key)
        del self._writable()[key]

    def __contains__(self, key: object) -> bool:
        self._check()
        return key in self._current()

    def __iter__(self) -> Iterator[str]:
        self._check()
        return iter(list(self._current()))

    def __len__(self) -> int:
        self._check()
        return len(self._source())

    def __repr__(self) -> str:
        state = "modified" if self._dirty else "unmodified"
        return f"<DraftDict {state} keys={list(self._current())!r}>"


class DraftList(Draft, MutableSequence[Any]):
    """Draft over a list or PVector.

    Item writes and appends go through the evolver. Inserts, deletions and
    slice assignment rebuild the vector, and child drafts read before such a
    change are committed and can no longer be used.
    """

    __slots__ = ()

    def _index(self, index: int) -> int:
        length = len(self)
        if index < 0:
            index += length
        if not 0 <= index < length:
            raise IndexError("draft list index out of range")
        return index

    def _splice(self, edit: Callable[[list[Any]], None]) -> None:
        self._commit_children()
        items = list(self._current())
        edit(items)
        self._evolver = pvector(items).evolver()
        self._writable()

    def __getitem__(self, index: Any) -> Any:
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        return self._read(self._index(index))

    def __setitem__(self, index: Any, value: Any) -> None:
        self._check()
        if isinstance(index, slice):
            values = [self._store(v) for v in value]
            self._splice(lambda items: items.__setitem__(index, values))
            return
        index = self._index(index)
        if self._source()[index] is value:
            return
        self._drop_child(index)
        self._writable()[index] = self._store(value)

    def __delitem__(self, index: Any) -> None:
        self._check()
        if not isinstance(index, slice):
            index = self._index(index)
        self._splice(lambda items: items.__delitem__(index))

    def __len__(self) -> int:
        self._check()
        return len(self._source())

    def __iter__(self) -> Iterator[Any]:
        for i in range(len(self)):
            yield self[i]

    def insert(self, index: int, value: Any) -> None:
        self._check()
        stored = self._store(value)
        self._splice(lambda items: items.insert(index, stored))

    def append(self, value: Any) -> None:
        self._check()
        self._writable().append(self._store(value))

    def extend(self, values: Iterable[Any]) -> None:
        self._check()
        stored = [self._store(v) for v in values]
        self._writable().extend(stored)

    def __repr__(self) -> str:
        state = "modified" if self._dirty else "unmodified"
        return f"<DraftList {state} len={len(self._source())}>"


def _draft_for(value: Any, scope: _Scope) -> Draft:
    if isinstance(value, (dict, PMap)):
        return DraftDict(value, scope)
    if isinstance(value, (list, PVector)):
        return DraftList(value, scope)
    raise DraftError(f"Cannot draft a value of type {type(value).__name__}")


def is_draft(value: Any) -> bool:
    return isinstance(value, Draft)


def begin_draft(base: Any, auto_freeze: bool = False) -> Draft:
    """Open a new draft scope over base (a dict, list, PMap or PVector)."""
    scope = _Scope(auto_freeze)
    draft = _draft_for(base, scope)
    scope.root = draft
    return draft


def original(draft: Any) -> Any:
    """Return the state the draft was created from, ignoring pending writes."""
    if not isinstance(draft, Draft):
        raise DraftError(f"original() expects a draft, got {type(draft).__name__}")
    draft._check()
    return draft._base


def _finalize_draft(draft: Draft) -> Any:
    if draft._result is not _UNSET:
        return draft._result
    draft._commit_children()
    result = draft._evolver.persistent() if draft._dirty else draft._base
    draft._result = result
    return result


def _resolve(value: Any, base: Any, auto_freeze: bool) -> Any:
    """Finalize the drafts embedded in a replacement state.

    Containers taken over from base cannot hold drafts and are kept as they
    are. New plain containers are walked, and frozen when auto_freeze is on.
    """
    if value is base:
        return value
    if isinstance(value, Draft):
        return _finalize_draft(value)
    if isinstance(value, dict):
        known = base if isinstance(base, Mapping) else {}
        items = {key: _resolve(item, known.get(key), auto_freeze) for key, item in value.items()}
        if auto_freeze:
            return pmap(items)
        changed = any(items[key] is not item for key, item in value.items())
        return items if changed else value
    if isinstance(value, list):
        shared = {id(item) for item in base} if isinstance(base, (list, PVector)) else set()
        resolved = [
            item if id(item) in shared else _resolve(item, None, auto_freeze) for item in value
        ]
        if auto_freeze:
            return pvector(resolved)
        changed = any(new is not old for new, old in zip(resolved, value))
        return resolved if changed else value
    return value


def finalize(draft: Draft) -> Any:
    """Turn a root draft into a new snapshot and revoke the draft scope.

    Returns:
        The base itself if nothing was written, otherwise a new snapshot that
        shares every untouched subtree with the base
    """
    if not isinstance(draft, Draft):
        raise DraftError(f"finalize() expects a draft, got {type(draft).__name__}")
    if draft is not draft._scope.root:
        raise DraftError("finalize() expects a root draft")
    draft._check()
    try:
        return _finalize_draft(draft)
    finally:
        draft._scope.revoked = True


def produce(base: S, recipe: Callable[[Any], Any], auto_freeze: bool = False) -> S:
    """Apply recipe to a draft of base and return the resulting snapshot.

    The recipe either mutates the draft and returns None, or leaves the draft
    untouched and returns a replacement state. A replacement may embed drafts
    (for example by spreading the draft); they resolve to their results.

    Raises:
        DraftError: If the recipe both modified the draft and returned a value
    """
    draft = begin_draft(base, auto_freeze)
    scope = draft._scope
    try:
        returned = recipe(draft)
        if returned is None or returned is draft:
            return cast(S, _finalize_draft(draft))
        if scope.modified:
            raise DraftError("An update recipe returned a new state *and* modified its draft")
        return cast(S, _resolve(returned, base, auto_freeze))
    finally:
        scope.revoked = True
