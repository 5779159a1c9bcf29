"""
conftest.py
===========
Session-level pytest configuration for the test suite.

Custom marks
------------
slow
    Applied to tests that run the quartet parsimony or ML optimisers on
    matrices large enough to take several seconds on the 'python' backend.
    Deselect with ``-m "not slow"``.

Warning filters
---------------
NumbaPerformanceWarning messages are filtered out during tests. They are
expected with the tiny alignments used here and say nothing about
correctness.
"""

import warnings


def pytest_configure(config):
    """
    Configure pytest before test collection begins.

    Runs before any test module is imported, so the filter is in place
    before the numba kernels compile.
    """
    config.addinivalue_line(
        "markers",
        "slow: larger inputs on the uncompiled backend (deselect with -m 'not slow')",
    )

    from numba.core.errors import NumbaPerformanceWarning

    warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)


def pytest_unconfigure(config):
    """Restore default warning behavior."""
    warnings.resetwarnings()
