"""
Pull-based sequence core.

Every producer and adapter is a ``Sequence``: a stateful object whose only
required operation is ``pull()``, returning ``Some(element)`` or ``NOTHING``.
Chainable adapter methods build new sequences without touching any element;
terminal methods (see ``lazyseq.terminals``) drive the pulls.
"""

from typing import Any, Callable, Iterable, Optional, TypeVar

from lazyseq.errors import ConfigurationError
from lazyseq.option import NOTHING, Option
from lazyseq.terminals import TerminalMixin

T = TypeVar('T')
U = TypeVar('U')


class Sequence(TerminalMixin):
    """
    A lazily evaluated, stateful stream of elements.

    Sequences are Python iterators too, so ``for x in seq`` and ``list(seq)``
    drive them exactly like the terminal consumers do.
    """

    def pull(self) -> Option:
        """Produce the next element, or NOTHING once exhausted."""
        raise NotImplementedError

    def pull_back(self) -> Option:
        """Produce the last remaining element (double-ended sequences only)."""
        raise ConfigurationError(f"{type(self).__name__} cannot be traversed from the back")

    @property
    def double_ended(self) -> bool:
        return False

    @property
    def is_unbounded(self) -> bool:
        """True only when the sequence is known never to exhaust."""
        return False

    def remaining(self) -> Optional[int]:
        """Exact number of elements left, or None if it cannot be known without pulling."""
        return None

    # --------- iterator protocol ----------
    def __iter__(self):
        return self

    def __next__(self):
        item = self.pull()
        if not item.present:
            raise StopIteration
        return item.value

    # --------- stateless adapters ----------
    def map(self, fn: Callable[[T], U]) -> 'Sequence':
        return _adapters.Map(self, fn)

    def filter(self, pred: Callable[[T], Any]) -> 'Sequence':
        return _adapters.Filter(self, pred)

    def filter_map(self, fn: Callable[[T], Option]) -> 'Sequence':
        return _adapters.FilterMap(self, fn)

    def enumerate(self) -> 'Sequence':
        return _adapters.Enumerate(self)

    def cloned(self) -> 'Sequence':
        return _adapters.Cloned(self)

    def inspect(self, fn: Callable[[T], Any]) -> 'Sequence':
        return _adapters.Inspect(self, fn)

    def flat_map(self, fn: Callable[[T], Iterable[U]]) -> 'Sequence':
        return _adapters.FlatMap(self, fn)

    def flatten(self) -> 'Sequence':
        return _adapters.FlatMap(self, lambda inner: inner)

    def chunks(self, size: int) -> 'Sequence':
        return _adapters.Chunks(self, size)

    # --------- stateful / control adapters ----------
    def take(self, n: int) -> 'Sequence':
        return _control.Take(self, n)

    def skip(self, n: int) -> 'Sequence':
        return _control.Skip(self, n)

    def take_while(self, pred: Callable[[T], Any]) -> 'Sequence':
        return _control.TakeWhile(self, pred)

    def skip_while(self, pred: Callable[[T], Any]) -> 'Sequence':
        return _control.SkipWhile(self, pred)

    def step_by(self, step: int) -> 'Sequence':
        return _control.StepBy(self, step)

    def rev(self) -> 'Sequence':
        return _control.Rev(self)

    def cycle(self) -> 'Sequence':
        return _control.Cycle(self)

    def peekable(self) -> 'Sequence':
        return _control.Peekable(self)

    def by_ref(self) -> 'Sequence':
        return _control.ByRef(self)

    def zip(self, other: Iterable[U]) -> 'Sequence':
        return _control.Zip(self, _producers.as_sequence(other))

    def chain(self, other: Iterable[T]) -> 'Sequence':
        return _control.Chain(self, _producers.as_sequence(other))


class Adapter(Sequence):
    """
    Base for sequences wrapping an inner sequence.

    ``pull()`` fuses the adapter: after the first NOTHING every later pull
    returns NOTHING without touching the inner sequence. Subclasses implement
    ``_next()`` and, when double-ended, ``_next_back()``.
    """

    def __init__(self, inner: Sequence):
        self._inner = inner
        self._exhausted = False

    def pull(self) -> Option:
        if self._exhausted:
            return NOTHING
        item = self._next()
        if not item.present:
            self._exhausted = True
        return item

    def pull_back(self) -> Option:
        if not self.double_ended:
            return super().pull_back()
        if self._exhausted:
            return NOTHING
        item = self._next_back()
        if not item.present:
            self._exhausted = True
        return item

    def _next(self) -> Option:
        raise NotImplementedError

    def _next_back(self) -> Option:
        raise NotImplementedError

    @property
    def is_unbounded(self) -> bool:
        return self._inner.is_unbounded

    def __repr__(self):
        return f"{type(self).__name__}({self._inner!r})"


# Adapter modules subclass Adapter, so they are bound after it exists.
from lazyseq import adapters as _adapters  # noqa: E402
from lazyseq import control as _control  # noqa: E402
from lazyseq import producers as _producers  # noqa: E402
