"""Configuration collection and test set execution.

The primary public entry points are `DocumentLoader` and `collect`,
which build normalized test sets from configuration files, and
`run_test_set`, which executes a test set and produces a test report.
"""

from .collector import EXTENSIONS, DocumentLoader, Format, collect
from .runner import run_test_set

__all__ = (
    'EXTENSIONS',
    'DocumentLoader',
    'Format',
    'collect',
    'run_test_set',
)
