"""
conftest.py
===========
Session-level pytest configuration for the test suite.

Custom marks
------------
statistical
    Applied to tests that repeat a draw thousands of times to check a
    distributional property (degenerate weights, 50/50 balance).  They run
    by default; deselect with ``-m "not statistical"`` for a quick pass.

    Registration here suppresses PytestUnknownMarkWarning and makes the mark
    visible in ``pytest --markers``.

Warning filters
---------------
NumbaPerformanceWarning messages are filtered out during tests. They concern
kernel compilation on tiny inputs and are not informative for correctness
testing.
"""

import warnings

from numba.core.errors import NumbaPerformanceWarning


def pytest_configure(config):
    """
    Configure pytest before test collection begins.

    This runs before any test modules are imported, which is important for
    catching warnings from numba kernel compilation.
    """
    config.addinivalue_line(
        "markers",
        "statistical: repeated-draw distribution checks "
        '(deselect with -m "not statistical")',
    )

    warnings.filterwarnings("ignore", category=NumbaPerformanceWarning)


def pytest_unconfigure(config):
    """Restore default warning behavior after all tests complete."""
    warnings.resetwarnings()
