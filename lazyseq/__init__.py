"""
lazyseq - a lazy, pull-based sequence engine.

    >>> from lazyseq import iterate
    >>> iterate([1, 2, 3, 4]).map(lambda x: x * x).collect()
    [1, 4, 9, 16]
"""

from lazyseq.core import Adapter, Sequence
from lazyseq.errors import (
    AbsentValueError,
    ConfigurationError,
    ConsumedSourceError,
    LazySequenceError,
    PullBudgetExceeded,
    UnknownFunctionError,
)
from lazyseq.option import NOTHING, Option, Some
from lazyseq.producers import Source, as_sequence, count_from, empty, from_fn, iterate, repeat
from lazyseq.terminals import extend

__version__ = "1.0.0"

__all__ = [
    "Adapter",
    "Sequence",
    "Option",
    "Some",
    "NOTHING",
    "Source",
    "as_sequence",
    "iterate",
    "count_from",
    "repeat",
    "from_fn",
    "empty",
    "extend",
    "LazySequenceError",
    "ConfigurationError",
    "AbsentValueError",
    "ConsumedSourceError",
    "PullBudgetExceeded",
    "UnknownFunctionError",
]
