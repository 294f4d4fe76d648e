"""Presence/absence wrapper returned by pulls and lookups."""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from lazyseq.errors import AbsentValueError

T = TypeVar('T')
U = TypeVar('U')


@dataclass(frozen=True, repr=False)
class Option(Generic[T]):
    """
    Either an element is present (``Some(value)``) or there is nothing here
    (``NOTHING``). ``None`` is a perfectly valid element, which is why pulls
    do not signal exhaustion with it.

    Truthiness follows presence, so ``Some(0)`` is truthy and ``NOTHING`` is not.
    """
    present: bool
    value: Optional[T] = None

    @classmethod
    def of(cls, value: Optional[T]) -> 'Option[T]':
        """Wrap ``value``, mapping ``None`` to absence."""
        return NOTHING if value is None else cls(True, value)

    def is_some(self) -> bool:
        return self.present

    def is_none(self) -> bool:
        return not self.present

    def unwrap(self) -> T:
        if not self.present:
            raise AbsentValueError("Called unwrap() on an absent value")
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value if self.present else default

    def unwrap_or_else(self, fn: Callable[[], T]) -> T:
        return self.value if self.present else fn()

    def map(self, fn: Callable[[T], U]) -> 'Option[U]':
        return Option(True, fn(self.value)) if self.present else NOTHING

    def filter(self, pred: Callable[[T], Any]) -> 'Option[T]':
        return self if self.present and pred(self.value) else NOTHING

    def __bool__(self):
        return self.present

    def __repr__(self):
        return f"Some({self.value!r})" if self.present else "NOTHING"


def Some(value: T) -> Option[T]:
    return Option(True, value)


NOTHING: Option[Any] = Option(False)
