"""
Stateful and control adapters.

These carry cursor or lookahead state across pulls. The ones that stop early
(take, take_while, zip) never pull their inner sequence further than the
element that decided the stop.
"""

import logging
from typing import Any, Callable, Optional

from lazyseq.core import Adapter, Sequence
from lazyseq.errors import ConfigurationError, PullBudgetExceeded, require_count
from lazyseq.option import NOTHING, Option, Some

logger = logging.getLogger(__name__)


class Take(Adapter):
    def __init__(self, inner: Sequence, n: int):
        require_count("take", n, 0)
        super().__init__(inner)
        self._left = n

    def _next(self) -> Option:
        if self._left == 0:
            return NOTHING
        item = self._inner.pull()
        if item.present:
            self._left -= 1
        return item

    def _next_back(self) -> Option:
        if self._left == 0:
            return NOTHING
        surplus = self._inner.remaining() - self._left
        for _ in range(surplus):
            self._inner.pull_back()
        item = self._inner.pull_back()
        if item.present:
            self._left -= 1
        return item

    @property
    def double_ended(self) -> bool:
        return self._inner.double_ended and self._inner.remaining() is not None

    @property
    def is_unbounded(self) -> bool:
        return False

    def remaining(self) -> Optional[int]:
        inner_remaining = self._inner.remaining()
        if inner_remaining is None:
            return self._left if self._inner.is_unbounded else None
        return min(self._left, inner_remaining)


class Skip(Adapter):
    """Discards the first ``n`` elements on the first pull, not at construction."""

    def __init__(self, inner: Sequence, n: int):
        require_count("skip", n, 0)
        super().__init__(inner)
        self._pending = n

    def _next(self) -> Option:
        if self._pending:
            pending, self._pending = self._pending, 0
            for _ in range(pending):
                if not self._inner.pull().present:
                    return NOTHING
        return self._inner.pull()

    def _next_back(self) -> Option:
        if self.remaining() == 0:
            return NOTHING
        return self._inner.pull_back()

    @property
    def double_ended(self) -> bool:
        return self._inner.double_ended and self._inner.remaining() is not None

    def remaining(self) -> Optional[int]:
        inner_remaining = self._inner.remaining()
        if inner_remaining is None:
            return None
        return max(inner_remaining - self._pending, 0)


class TakeWhile(Adapter):
    """Stops at the first element failing ``pred``; that element is consumed and lost."""

    def __init__(self, inner: Sequence, pred: Callable):
        super().__init__(inner)
        self._pred = pred

    def _next(self) -> Option:
        item = self._inner.pull()
        if item.present and not self._pred(item.value):
            return NOTHING
        return item

    @property
    def is_unbounded(self) -> bool:
        return False


class SkipWhile(Adapter):
    def __init__(self, inner: Sequence, pred: Callable):
        super().__init__(inner)
        self._pred = pred
        self._skipping = True

    def _next(self) -> Option:
        if not self._skipping:
            return self._inner.pull()
        while True:
            item = self._inner.pull()
            if not item.present or not self._pred(item.value):
                self._skipping = False
                return item


class StepBy(Adapter):
    """Yields the elements at offsets 0, step, 2 * step, ..."""

    def __init__(self, inner: Sequence, step: int):
        require_count("step_by", step, 1)
        super().__init__(inner)
        self._step = step
        self._first = True

    def _next(self) -> Option:
        if self._first:
            self._first = False
            return self._inner.pull()
        return self._inner.nth(self._step - 1)


class Rev(Adapter):
    def __init__(self, inner: Sequence):
        if inner.is_unbounded:
            raise ConfigurationError("rev() cannot be applied to an unbounded sequence")
        if not inner.double_ended:
            raise ConfigurationError(f"rev() requires a double-ended source, {type(inner).__name__} is not")
        super().__init__(inner)

    def _next(self) -> Option:
        return self._inner.pull_back()

    def _next_back(self) -> Option:
        return self._inner.pull()

    @property
    def double_ended(self) -> bool:
        return True

    def remaining(self) -> Optional[int]:
        return self._inner.remaining()


class Cycle(Adapter):
    """
    Buffers the source on its first pass, then replays the buffer forever.

    An empty source leaves the cycle immediately exhausted. Anything else never
    exhausts, so a bounding adapter or early-exit consumer must follow.
    """

    def __init__(self, inner: Sequence):
        if inner.is_unbounded:
            raise ConfigurationError("cycle() requires a finite source")
        super().__init__(inner)
        self._buffer = []
        self._replaying = False
        self._index = 0

    def _next(self) -> Option:
        if not self._replaying:
            item = self._inner.pull()
            if item.present:
                self._buffer.append(item.value)
                return item
            self._replaying = True
            self._inner = None
            logger.debug(f"cycle source exhausted after {len(self._buffer)} elements; replaying")
        if not self._buffer:
            return NOTHING
        value = self._buffer[self._index]
        self._index = (self._index + 1) % len(self._buffer)
        return Some(value)

    def _known_empty(self) -> bool:
        if self._replaying:
            return not self._buffer
        return not self._buffer and self._inner.remaining() == 0

    def _next_back(self) -> Option:
        return NOTHING

    @property
    def double_ended(self) -> bool:
        return self._known_empty()

    @property
    def is_unbounded(self) -> bool:
        return not self._known_empty()

    def remaining(self) -> Optional[int]:
        return 0 if self._known_empty() else None

    def __repr__(self):
        return f"Cycle(buffered={len(self._buffer)})"


class Peekable(Adapter):
    """Adds ``peek()``: look at the next element without consuming it."""

    def __init__(self, inner: Sequence):
        super().__init__(inner)
        self._peeked: Optional[Option] = None

    def peek(self) -> Option:
        if self._exhausted:
            return NOTHING
        if self._peeked is None:
            self._peeked = self._inner.pull()
        return self._peeked

    def next_if(self, pred: Callable[[Any], Any]) -> Option:
        """Consume and return the next element only if it satisfies ``pred``."""
        item = self.peek()
        if item.present and pred(item.value):
            return self.pull()
        return NOTHING

    def _next(self) -> Option:
        if self._peeked is not None:
            item, self._peeked = self._peeked, None
            return item
        return self._inner.pull()

    def remaining(self) -> Optional[int]:
        inner_remaining = self._inner.remaining()
        if inner_remaining is None:
            return None
        if self._peeked is not None and self._peeked.present:
            return inner_remaining + 1
        return inner_remaining


class ByRef(Sequence):
    """
    Non-owning handle: every pull goes straight to the original sequence, so
    adapters built on the handle advance the original's cursor. Once the
    handle is dropped the original carries on from where it stopped.
    """

    def __init__(self, target: Sequence):
        self._target = target

    def pull(self) -> Option:
        return self._target.pull()

    def pull_back(self) -> Option:
        return self._target.pull_back()

    @property
    def double_ended(self) -> bool:
        return self._target.double_ended

    @property
    def is_unbounded(self) -> bool:
        return self._target.is_unbounded

    def remaining(self) -> Optional[int]:
        return self._target.remaining()

    def __getattr__(self, name):
        # peek(), next_if() and friends of the borrowed sequence
        if name == '_target':
            raise AttributeError(name)
        return getattr(self._target, name)

    def __repr__(self):
        return f"ByRef({self._target!r})"


class Zip(Adapter):
    """
    Pairs elements from two sequences. Stops when either side is exhausted;
    the right side is not pulled once the left side has run out, and the left
    side is not pulled when the right side reports nothing remaining.

    A right side of unknown length (a generator, say) can only report its
    exhaustion by being pulled, which costs the left side one element.
    """

    def __init__(self, left: Sequence, right: Sequence):
        super().__init__(left)
        self._right = right

    def _next(self) -> Option:
        if self._right.remaining() == 0:
            return NOTHING
        left = self._inner.pull()
        if not left.present:
            return NOTHING
        right = self._right.pull()
        if not right.present:
            return NOTHING
        return Some((left.value, right.value))

    @property
    def is_unbounded(self) -> bool:
        return self._inner.is_unbounded and self._right.is_unbounded

    def remaining(self) -> Optional[int]:
        known = [side.remaining() for side in (self._inner, self._right) if not side.is_unbounded]
        if any(count is None for count in known):
            return None
        return min(known) if known else None


class Chain(Adapter):
    """Everything from the first sequence, then everything from the second."""

    def __init__(self, first: Sequence, second: Sequence):
        super().__init__(first)
        self._second: Optional[Sequence] = second

    def _next(self) -> Option:
        if self._inner is not None:
            item = self._inner.pull()
            if item.present:
                return item
            self._inner = None
        if self._second is None:
            return NOTHING
        return self._second.pull()

    def _next_back(self) -> Option:
        if self._second is not None:
            item = self._second.pull_back()
            if item.present:
                return item
            self._second = None
        if self._inner is None:
            return NOTHING
        return self._inner.pull_back()

    def _parts(self):
        return [part for part in (self._inner, self._second) if part is not None]

    @property
    def double_ended(self) -> bool:
        return all(part.double_ended for part in self._parts())

    @property
    def is_unbounded(self) -> bool:
        return any(part.is_unbounded for part in self._parts())

    def remaining(self) -> Optional[int]:
        counts = [part.remaining() for part in self._parts()]
        if any(count is None for count in counts):
            return None
        return sum(counts)

    def __repr__(self):
        return f"Chain({self._inner!r}, {self._second!r})"


class PullBudget(Adapter):
    """
    Passes at most ``budget`` elements through; pulling one more raises
    PullBudgetExceeded. Reporting exhaustion never counts against the budget.
    """

    def __init__(self, inner: Sequence, budget: int):
        require_count("pull_budget", budget, 1)
        super().__init__(inner)
        self._budget = budget
        self._pulls = 0

    def _next(self) -> Option:
        item = self._inner.pull()
        if item.present:
            if self._pulls >= self._budget:
                raise PullBudgetExceeded(self._budget)
            self._pulls += 1
        return item

    @property
    def pulls(self) -> int:
        return self._pulls
