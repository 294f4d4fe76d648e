"""
Root producers and the ownership discipline.

Borrowing views read a collection through their own cursor and leave it
intact. ``Source.into_iter()`` is the consuming entry point: the storage moves
into a ``Drain`` and the Source refuses every later read.

A collection viewed in borrowing mode must not be mutated while a chain over
it is being driven. Nothing here locks; it is a caller precondition.
"""

import logging
from collections.abc import Sequence as _IndexableABC
from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

from lazyseq.core import Sequence
from lazyseq.errors import ConsumedSourceError
from lazyseq.option import NOTHING, Option, Some

logger = logging.getLogger(__name__)

T = TypeVar('T')


class SliceSource(Sequence):
    """Double-ended borrowing view over an indexable collection (list, tuple, range, str)."""

    def __init__(self, items, owner: Optional['Source'] = None):
        self._items = items
        self._owner = owner
        self._front = 0
        self._back = len(items)

    def _check_owner(self):
        if self._owner is not None and self._owner.consumed:
            raise ConsumedSourceError("Source was consumed while a borrowing view was still reading it")

    def pull(self) -> Option:
        self._check_owner()
        if self._front >= self._back:
            return NOTHING
        item = self._items[self._front]
        self._front += 1
        return Some(item)

    def pull_back(self) -> Option:
        self._check_owner()
        if self._front >= self._back:
            return NOTHING
        self._back -= 1
        return Some(self._items[self._back])

    @property
    def double_ended(self) -> bool:
        return True

    def remaining(self) -> Optional[int]:
        return self._back - self._front

    def __repr__(self):
        return f"SliceSource(remaining={self.remaining()})"


class IterSource(Sequence):
    """Forward-only view over any Python iterable (generators, sets, dict views...)."""

    def __init__(self, iterable: Iterable[T]):
        self._it = iter(iterable)
        self._done = False

    def pull(self) -> Option:
        if self._done:
            return NOTHING
        try:
            return Some(next(self._it))
        except StopIteration:
            self._done = True
            return NOTHING

    def __repr__(self):
        return f"IterSource({self._it!r})"


class Drain(Sequence):
    """Consuming sequence owning its storage; every yielded slot is released."""

    def __init__(self, storage: List[Any]):
        self._storage = storage
        self._front = 0
        self._back = len(storage)

    def pull(self) -> Option:
        if self._front >= self._back:
            return NOTHING
        item = self._storage[self._front]
        self._storage[self._front] = None
        self._front += 1
        return Some(item)

    def pull_back(self) -> Option:
        if self._front >= self._back:
            return NOTHING
        self._back -= 1
        item = self._storage[self._back]
        self._storage[self._back] = None
        return Some(item)

    @property
    def double_ended(self) -> bool:
        return True

    def remaining(self) -> Optional[int]:
        return self._back - self._front

    def __repr__(self):
        return f"Drain(remaining={self.remaining()})"


class Counter(Sequence):
    """Unbounded arithmetic progression: start, start + step, ..."""

    def __init__(self, start=0, step=1):
        self._next_value = start
        self._step = step

    def pull(self) -> Option:
        value = self._next_value
        self._next_value = value + self._step
        return Some(value)

    @property
    def is_unbounded(self) -> bool:
        return True

    def __repr__(self):
        return f"Counter(next={self._next_value!r}, step={self._step!r})"


class Repeat(Sequence):
    """Yields the same object forever."""

    def __init__(self, value: T):
        self._value = value

    def pull(self) -> Option:
        return Some(self._value)

    @property
    def is_unbounded(self) -> bool:
        return True


class FromFn(Sequence):
    """Procedural producer: each pull calls ``fn()``, which returns an Option."""

    def __init__(self, fn: Callable[[], Option]):
        self._fn = fn

    def pull(self) -> Option:
        result = self._fn()
        if not isinstance(result, Option):
            raise TypeError(f"from_fn callback must return an Option, got {type(result).__name__}")
        return result


class Empty(Sequence):
    def pull(self) -> Option:
        return NOTHING

    def pull_back(self) -> Option:
        return NOTHING

    @property
    def double_ended(self) -> bool:
        return True

    def remaining(self) -> Optional[int]:
        return 0


class Source(Generic[T]):
    """
    An owning collection with two ways to sequence it.

    ``iter()`` borrows: the returned view has its own cursor and the Source
    stays usable. ``into_iter()`` consumes: the storage moves into the
    returned sequence and any later read of this Source raises
    ConsumedSourceError. The choice cannot be undone.
    """

    def __init__(self, items: Iterable[T] = ()):
        self._items: Optional[List[T]] = list(items)
        self._consumed = False

    @property
    def consumed(self) -> bool:
        return self._consumed

    def _storage(self) -> List[T]:
        if self._consumed:
            raise ConsumedSourceError("Source has been moved into a consuming sequence and can no longer be read")
        return self._items

    def iter(self) -> Sequence:
        return SliceSource(self._storage(), owner=self)

    def into_iter(self) -> Sequence:
        storage = self._storage()
        self._items = None
        self._consumed = True
        logger.debug(f"Source of {len(storage)} elements moved into a consuming sequence")
        return Drain(storage)

    def append(self, item: T) -> None:
        self._storage().append(item)

    def extend(self, items: Iterable[T]) -> 'Source[T]':
        from lazyseq.terminals import extend
        return extend(self, items)

    def to_list(self) -> List[T]:
        return list(self._storage())

    def __len__(self):
        return len(self._storage())

    def __getitem__(self, index):
        return self._storage()[index]

    def __iter__(self):
        return self.iter()

    def __eq__(self, other):
        if isinstance(other, Source):
            return self._storage() == other._storage()
        if isinstance(other, list):
            return self._storage() == other
        return NotImplemented

    def __repr__(self):
        if self._consumed:
            return "Source(<consumed>)"
        return f"Source({self._items!r})"


# --------- construction entry points ----------
def as_sequence(obj) -> Sequence:
    """Wrap ``obj`` in a borrowing sequence unless it already is one."""
    if isinstance(obj, Sequence):
        return obj
    if isinstance(obj, Source):
        return obj.iter()
    if isinstance(obj, _IndexableABC):
        return SliceSource(obj)
    return IterSource(obj)


def iterate(collection) -> Sequence:
    """Borrowing entry point over any Python collection or iterable."""
    return as_sequence(collection)


def count_from(start=0, step=1) -> Sequence:
    return Counter(start, step)


def repeat(value: T) -> Sequence:
    return Repeat(value)


def from_fn(fn: Callable[[], Option]) -> Sequence:
    return FromFn(fn)


def empty() -> Sequence:
    return Empty()
