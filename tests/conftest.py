"""
Pytest configuration file for the lazyseq tests.

This file ensures that the repository root is in the Python path so that
test files can import the lazyseq package without installing it, and
provides shared fixtures.
"""

import sys
from pathlib import Path

# Add the parent directory to the Python path
parent_dir = Path(__file__).parent.parent
if str(parent_dir) not in sys.path:
    sys.path.insert(0, str(parent_dir))

import pytest

from lazyseq import NOTHING, Sequence, Some
from lazyseq.models import EngineSettings
from lazyseq.utils import clear_performance_metrics


class CountingSource(Sequence):
    """Producer over a list that records how many times it was pulled."""

    def __init__(self, items):
        self._items = list(items)
        self._index = 0
        self.pulls = 0

    def pull(self):
        self.pulls += 1
        if self._index >= len(self._items):
            return NOTHING
        item = self._items[self._index]
        self._index += 1
        return Some(item)


@pytest.fixture
def counting_source():
    """Factory fixture: counting_source([1, 2, 3]) -> CountingSource"""
    return CountingSource


@pytest.fixture
def call_counter():
    """A callable that counts its invocations and returns its argument."""
    class CallCounter:
        def __init__(self):
            self.calls = 0

        def __call__(self, x):
            self.calls += 1
            return x

    return CallCounter()


@pytest.fixture
def settings():
    return EngineSettings(max_pulls=1000, max_output=100, log_level="DEBUG")


@pytest.fixture(autouse=True)
def reset_metrics():
    """Start every test with empty performance metrics"""
    clear_performance_metrics()
    yield
    clear_performance_metrics()
