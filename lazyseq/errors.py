"""Exception types raised by the sequence engine."""


class LazySequenceError(Exception):
    """Base class for every error raised by lazyseq."""
    pass


class ConfigurationError(LazySequenceError, ValueError):
    """Raised when an adapter or consumer is built with an invalid argument."""
    pass


class AbsentValueError(LazySequenceError, LookupError):
    """Raised when unwrapping an Option that holds no element."""
    pass


class ConsumedSourceError(LazySequenceError, RuntimeError):
    """Raised when a Source is read after being handed to a consuming sequence."""
    pass


class PullBudgetExceeded(LazySequenceError):
    """Raised when a guarded chain requests more pulls than its budget allows."""

    def __init__(self, budget: int):
        super().__init__(f"Pull budget of {budget} exceeded; is the chain missing a bounding operation?")
        self.budget = budget


class UnknownFunctionError(LazySequenceError, KeyError):
    """Raised when a dynamic chain names a function that is not registered."""

    def __str__(self):
        return str(self.args[0]) if self.args else "Unknown function"


def require_count(operation: str, value, minimum: int) -> int:
    """Validate an integer construction argument such as step_by(n) or chunks(n)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{operation}() expects an integer, got {type(value).__name__}")
    if value < minimum:
        raise ConfigurationError(f"{operation}() requires n >= {minimum}, got {value}")
    return value
