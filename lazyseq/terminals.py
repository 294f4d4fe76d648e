"""
Terminal consumers.

Each consumer drives pulls until exhaustion or an early-exit condition and
returns a concrete value. None of them restarts the sequence: calling a second
consumer continues from wherever the first one stopped.
"""

from typing import Any, Callable, List, Optional, Tuple, TypeVar

from lazyseq.errors import require_count
from lazyseq.option import NOTHING, Option, Some

T = TypeVar('T')
A = TypeVar('A')


class TerminalMixin:
    """Consumers shared by every Sequence; relies only on ``pull()`` and iteration."""

    # --------- forcing evaluation ----------
    def collect(self, factory: Callable = list):
        """Accumulate every element into ``factory`` (list by default)."""
        if factory is str:
            return "".join(self)
        return factory(self)

    def to_list(self) -> List[Any]:
        return list(self)

    def for_each(self, fn: Callable[[T], Any]) -> None:
        for item in self:
            fn(item)

    # --------- reducing operations ----------
    def fold(self, seed: A, fn: Callable[[A, T], A]) -> A:
        """Apply ``fn(acc, element)`` left to right starting from ``seed``."""
        acc = seed
        for item in self:
            acc = fn(acc, item)
        return acc

    def reduce(self, fn: Callable[[T, T], T]) -> Option:
        """Fold using the first element as seed; NOTHING on an empty sequence."""
        first = self.pull()
        if not first.present:
            return NOTHING
        return Some(self.fold(first.value, fn))

    def sum(self, start=0):
        """Return the sum of all elements"""
        return self.fold(start, lambda acc, item: acc + item)

    def product(self, start=1):
        """Return the product of all elements"""
        return self.fold(start, lambda acc, item: acc * item)

    def count(self) -> int:
        """Return the count of elements"""
        count = 0
        for _ in self:
            count += 1
        return count

    def last(self) -> Option:
        last_item = NOTHING
        for item in self:
            last_item = Some(item)
        return last_item

    def nth(self, n: int) -> Option:
        """
        Discard ``n`` elements and return the next one.

        This advances the sequence: ``seq.nth(0)`` twice returns two different
        elements.
        """
        require_count("nth", n, 0)
        for _ in range(n):
            if not self.pull().present:
                return NOTHING
        return self.pull()

    # --------- searching ----------
    def find(self, pred: Callable[[T], Any]) -> Option:
        """Return the first element that satisfies the predicate"""
        for item in self:
            if pred(item):
                return Some(item)
        return NOTHING

    def position(self, pred: Callable[[T], Any]) -> Option:
        """Zero-based index of the first match, counted from the current cursor."""
        for index, item in enumerate(self):
            if pred(item):
                return Some(index)
        return NOTHING

    def any(self, pred: Optional[Callable[[T], Any]] = None) -> bool:
        """Return True if any element is truthy (or satisfies predicate)"""
        if pred is None:
            return any(self)
        return any(pred(x) for x in self)

    def all(self, pred: Optional[Callable[[T], Any]] = None) -> bool:
        """Return True if all elements are truthy (or satisfy predicate)"""
        if pred is None:
            return all(self)
        return all(pred(x) for x in self)

    # --------- ordering ----------
    def max(self) -> Option:
        """Largest element; the last of several equal maxima wins."""
        return self.max_by_key(_identity)

    def min(self) -> Option:
        """Smallest element; the first of several equal minima wins."""
        return self.min_by_key(_identity)

    def max_by_key(self, key: Callable[[T], Any]) -> Option:
        best = NOTHING
        best_key = None
        for item in self:
            item_key = key(item)
            if not best.present or item_key >= best_key:
                best, best_key = Some(item), item_key
        return best

    def min_by_key(self, key: Callable[[T], Any]) -> Option:
        best = NOTHING
        best_key = None
        for item in self:
            item_key = key(item)
            if not best.present or item_key < best_key:
                best, best_key = Some(item), item_key
        return best

    def max_by(self, cmp: Callable[[T, T], int]) -> Option:
        """``cmp(a, b)`` returns a negative, zero or positive number like a classic comparator."""
        best = NOTHING
        for item in self:
            if not best.present or cmp(item, best.value) >= 0:
                best = Some(item)
        return best

    def min_by(self, cmp: Callable[[T, T], int]) -> Option:
        best = NOTHING
        for item in self:
            if not best.present or cmp(item, best.value) < 0:
                best = Some(item)
        return best

    def is_sorted(self, cmp: Optional[Callable[[T, T], int]] = None) -> bool:
        """
        Check that elements are non-decreasing.

        With the natural order every adjacent pair must satisfy ``prev <= cur``;
        a pair that is incomparable (``<=`` evaluates false both ways, like NaN)
        counts as a violation. With ``cmp`` a violation is ``cmp(prev, cur) > 0``.
        Stops at the first violation.
        """
        prev = self.pull()
        if not prev.present:
            return True
        prev = prev.value
        for item in self:
            in_order = prev <= item if cmp is None else cmp(prev, item) <= 0
            if not in_order:
                return False
            prev = item
        return True

    def is_sorted_by_key(self, key: Callable[[T], Any]) -> bool:
        return self.map(key).is_sorted()

    # --------- splitting ----------
    def partition(self, pred: Callable[[T], Any], factory: Callable = list) -> Tuple[Any, Any]:
        """Split into (matching, rest), both in pull order."""
        matching, rest = [], []
        for item in self:
            (matching if pred(item) else rest).append(item)
        if factory is list:
            return matching, rest
        return factory(matching), factory(rest)

    def unzip(self) -> Tuple[List[Any], List[Any]]:
        left, right = [], []
        for first, second in self:
            left.append(first)
            right.append(second)
        return left, right


def extend(target, items):
    """
    Append every element of ``items`` to ``target`` in pull order.

    ``items`` is fully consumed. ``target`` needs an ``append`` (lists,
    ``Source``) or ``add`` (sets) method. Returns ``target``.
    """
    from lazyseq.producers import as_sequence

    append = getattr(target, 'append', None) or getattr(target, 'add', None)
    if append is None:
        raise TypeError(f"Cannot extend {type(target).__name__}: no append() or add() method")
    for item in as_sequence(items):
        append(item)
    return target


def _identity(item):
    return item
