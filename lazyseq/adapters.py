"""
Stateless adapters: each pull applies a per-element transform to what the
inner sequence yields. Only ``chunks`` and ``flat_map`` hold anything across
pulls (the current chunk, the current inner sequence).
"""

import copy
from typing import Any, Callable, Optional

from lazyseq.core import Adapter, Sequence
from lazyseq.errors import require_count
from lazyseq.option import NOTHING, Option, Some
from lazyseq.producers import as_sequence


class Map(Adapter):
    def __init__(self, inner: Sequence, fn: Callable):
        super().__init__(inner)
        self._fn = fn

    def _next(self) -> Option:
        return self._inner.pull().map(self._fn)

    def _next_back(self) -> Option:
        return self._inner.pull_back().map(self._fn)

    @property
    def double_ended(self) -> bool:
        return self._inner.double_ended

    def remaining(self) -> Optional[int]:
        return self._inner.remaining()


class Inspect(Map):
    """Calls ``fn`` on each element for its side effect; yields the element unchanged."""

    def __init__(self, inner: Sequence, fn: Callable):
        def tap(item):
            fn(item)
            return item
        super().__init__(inner, tap)


class Cloned(Map):
    """Yields an independent deep copy of every element."""

    def __init__(self, inner: Sequence):
        super().__init__(inner, copy.deepcopy)


class Filter(Adapter):
    def __init__(self, inner: Sequence, pred: Callable):
        super().__init__(inner)
        self._pred = pred

    def _next(self) -> Option:
        return self._search(self._inner.pull)

    def _next_back(self) -> Option:
        return self._search(self._inner.pull_back)

    def _search(self, pull) -> Option:
        while True:
            item = pull()
            if not item.present or self._pred(item.value):
                return item

    @property
    def double_ended(self) -> bool:
        return self._inner.double_ended


class FilterMap(Adapter):
    """``fn`` returns an Option per element; only present results are yielded."""

    def __init__(self, inner: Sequence, fn: Callable[[Any], Option]):
        super().__init__(inner)
        self._fn = fn

    def _next(self) -> Option:
        return self._search(self._inner.pull)

    def _next_back(self) -> Option:
        return self._search(self._inner.pull_back)

    def _search(self, pull) -> Option:
        while True:
            item = pull()
            if not item.present:
                return item
            result = self._fn(item.value)
            if not isinstance(result, Option):
                raise TypeError(f"filter_map function must return an Option, got {type(result).__name__}")
            if result.present:
                return result

    @property
    def double_ended(self) -> bool:
        return self._inner.double_ended


class Enumerate(Adapter):
    """
    Pairs elements with a zero-based index counted on this adapter's own
    successful pulls, regardless of what inner adapters skipped.
    """

    def __init__(self, inner: Sequence):
        super().__init__(inner)
        self._count = 0

    def _next(self) -> Option:
        item = self._inner.pull()
        if not item.present:
            return item
        index = self._count
        self._count += 1
        return Some((index, item.value))

    def _next_back(self) -> Option:
        remaining = self._inner.remaining()
        item = self._inner.pull_back()
        if not item.present:
            return item
        return Some((self._count + remaining - 1, item.value))

    @property
    def double_ended(self) -> bool:
        return self._inner.double_ended and self._inner.remaining() is not None

    def remaining(self) -> Optional[int]:
        return self._inner.remaining()


class FlatMap(Adapter):
    """
    ``fn`` turns each outer element into an iterable, which is drained in
    order before the next outer element is pulled.
    """

    def __init__(self, inner: Sequence, fn: Callable):
        super().__init__(inner)
        self._fn = fn
        self._current: Optional[Sequence] = None

    def _next(self) -> Option:
        while True:
            if self._current is not None:
                item = self._current.pull()
                if item.present:
                    return item
                self._current = None
            outer = self._inner.pull()
            if not outer.present:
                return NOTHING
            self._current = as_sequence(self._fn(outer.value))


class Chunks(Adapter):
    """Groups elements into lists of ``size``; the final list may be shorter."""

    def __init__(self, inner: Sequence, size: int):
        require_count("chunks", size, 1)
        super().__init__(inner)
        self._size = size

    def _next(self) -> Option:
        bucket = []
        while len(bucket) < self._size:
            item = self._inner.pull()
            if not item.present:
                break
            bucket.append(item.value)
        return Some(bucket) if bucket else NOTHING

    def remaining(self) -> Optional[int]:
        remaining = self._inner.remaining()
        if remaining is None:
            return None
        return -(-remaining // self._size)
