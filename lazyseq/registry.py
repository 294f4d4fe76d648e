"""
Named function registry for chains assembled from runtime configuration.

Functions are grouped by the role they play in a chain, so an operation can only
plug a predicate where a predicate is expected.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

from lazyseq.errors import UnknownFunctionError
from lazyseq.option import NOTHING, Some

logger = logging.getLogger(__name__)

FUNCTION_KINDS = ('unary', 'predicate', 'optional', 'binary', 'comparator', 'key', 'expander')

# Global function registry
FUNCTION_REGISTRY: Dict[str, Dict[str, Dict[str, Any]]] = {kind: {} for kind in FUNCTION_KINDS}


def register_function(name: str, kind: str, fn: Optional[Callable] = None, description: str = ""):
    """
    Register ``fn`` under ``name`` for the given kind.

    Usable directly or as a decorator::

        @register_function("triple", "unary")
        def triple(x):
            return x * 3
    """
    if kind not in FUNCTION_REGISTRY:
        raise ValueError(f"Unknown function kind '{kind}'. Valid kinds: {list(FUNCTION_KINDS)}")

    def decorator(func: Callable) -> Callable:
        FUNCTION_REGISTRY[kind][name] = {
            'function': func,
            'description': description or (func.__doc__ or "").strip().split('\n')[0],
            'registered_at': time.time()
        }
        logger.debug(f"Registered {kind} function: {name}")
        return func

    if fn is not None:
        return decorator(fn)
    return decorator


def get_function(name: str, kind: str) -> Callable:
    try:
        return FUNCTION_REGISTRY[kind][name]['function']
    except KeyError:
        available = sorted(FUNCTION_REGISTRY.get(kind, {}))
        raise UnknownFunctionError(f"No {kind} function named '{name}'. Available: {available}") from None


def get_registered_functions(kind: Optional[str] = None) -> Dict[str, Dict[str, str]]:
    """Return {kind: {name: description}}, optionally for a single kind."""
    kinds = [kind] if kind else list(FUNCTION_REGISTRY)
    return {
        k: {name: info['description'] for name, info in FUNCTION_REGISTRY.get(k, {}).items()}
        for k in kinds
    }


def unregister_function(name: str, kind: str) -> bool:
    return FUNCTION_REGISTRY.get(kind, {}).pop(name, None) is not None


# ---------- built-in functions ----------

def _parse_int(value):
    """Parse a value as an integer, absent when it is not one"""
    try:
        return Some(int(value))
    except (TypeError, ValueError):
        return NOTHING


def _compare(a, b):
    return (a > b) - (a < b)


_BUILTINS = {
    'unary': {
        'identity': (lambda x: x, "Return the element unchanged"),
        'square': (lambda x: x * x, "Multiply the element by itself"),
        'double': (lambda x: x * 2, "Multiply the element by two"),
        'negate': (lambda x: -x, "Negate the element"),
        'increment': (lambda x: x + 1, "Add one to the element"),
        'to_string': (str, "Convert the element to a string"),
        'upper': (lambda s: s.upper(), "Upper-case a string element"),
        'length': (len, "Length of the element"),
    },
    'predicate': {
        'is_even': (lambda x: x % 2 == 0, "Element is an even number"),
        'is_odd': (lambda x: x % 2 != 0, "Element is an odd number"),
        'is_positive': (lambda x: x > 0, "Element is greater than zero"),
        'is_negative': (lambda x: x < 0, "Element is less than zero"),
        'is_truthy': (bool, "Element is truthy"),
        'is_digit': (lambda s: isinstance(s, str) and s.isdigit(), "Element is a string of digits"),
    },
    'optional': {
        'parse_int': (_parse_int, "Parse a value as an integer, absent when it is not one"),
        'half_if_even': (lambda x: Some(x // 2) if x % 2 == 0 else NOTHING, "Half of an even number, absent for odd"),
    },
    'binary': {
        'add': (lambda a, b: a + b, "Sum of accumulator and element"),
        'multiply': (lambda a, b: a * b, "Product of accumulator and element"),
        'maximum': (lambda a, b: a if a >= b else b, "Larger of accumulator and element"),
    },
    'comparator': {
        'ascending': (_compare, "Natural ascending order"),
        'descending': (lambda a, b: _compare(b, a), "Natural descending order"),
    },
    'key': {
        'identity': (lambda x: x, "The element itself"),
        'length': (len, "Length of the element"),
        'absolute': (abs, "Absolute value of the element"),
    },
    'expander': {
        'pair': (lambda x: [x, x], "The element twice"),
        'range_to': (lambda n: range(n), "Integers from 0 up to the element"),
        'characters': (list, "Characters of a string element"),
    },
}


def register_builtins():
    for kind, functions in _BUILTINS.items():
        for name, (fn, description) in functions.items():
            register_function(name, kind, fn, description)
    logger.debug(f"Registered {sum(len(f) for f in _BUILTINS.values())} built-in functions")


register_builtins()
