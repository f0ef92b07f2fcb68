"""
_context.py
===========
Context managers for sbnwalk.

Provides clean, Pythonic context managers for temporarily changing state:
- Logging control (suppress/change levels)
- Warning control (suppress specific warnings)
- Random stream control (reseed for a block, then restore)

All context managers properly restore state on exit, even if exceptions occur.
"""

import logging
import warnings
from contextlib import contextmanager
from typing import Optional, Type


# ============================================================================ #
# Logging Context Managers
# ============================================================================ #


@contextmanager
def suppress_logger(logger_name: str, level: int = logging.CRITICAL):
    """
    Temporarily change a logger's level.

    Parameters
    ----------
    logger_name : str
        Name of the logger to suppress (e.g., 'sbnwalk._dag')
    level : int, default logging.CRITICAL
        Temporary logging level.

    Examples
    --------
    >>> # Build a large DAG without its summary lines
    >>> with suppress_logger('sbnwalk._dag'):
    ...     dag = SubsplitDAG(subsplits, edges)

    Notes
    -----
    - Exception-safe: Logger level restored even if exception raised
    - Nesting-safe: Can nest multiple suppress_logger contexts
    """
    logger = logging.getLogger(logger_name)
    original_level = logger.level

    try:
        logger.setLevel(level)
        yield
    finally:
        logger.setLevel(original_level)


@contextmanager
def quiet(level: int = logging.CRITICAL):
    """
    Temporarily suppress all sbnwalk logging.

    Every module logger is a child of the ``sbnwalk`` logger, so raising the
    package logger's level silences them all.

    Examples
    --------
    >>> with quiet():
    ...     counts = sampler.topology_counts(10_000, 0, dag, forward, backward)

    >>> # Show only warnings
    >>> with quiet(logging.WARNING):
    ...     dag = SubsplitDAG(subsplits, edges)
    """
    with suppress_logger("sbnwalk", level):
        yield


# ============================================================================ #
# Warning Context Managers
# ============================================================================ #


@contextmanager
def suppress_warnings(category: Optional[Type[Warning]] = None):
    """
    Temporarily suppress warnings.

    Parameters
    ----------
    category : Type[Warning] or None, default None
        Warning category to suppress. If None, suppresses all warnings.

    Examples
    --------
    >>> from numba.core.errors import NumbaPerformanceWarning
    >>> with suppress_warnings(NumbaPerformanceWarning):
    ...     tree = sampler.sample(0, dag, forward, backward)
    """
    with warnings.catch_warnings():
        if category is None:
            warnings.simplefilter("ignore")
        else:
            warnings.filterwarnings("ignore", category=category)
        yield


# ============================================================================ #
# Random Stream Context Managers
# ============================================================================ #


@contextmanager
def seeded(source, seed: int):
    """
    Reseed a random stream for the duration of a block, then restore the
    exact generator state it had before.

    Parameters
    ----------
    source : TopologySampler or WeightedRandom
        Anything exposing a ``WeightedRandom`` (``.random``) or being one.
    seed : int
        Seed applied on entry.

    Examples
    --------
    >>> with seeded(sampler, 7):
    ...     a = sampler.sample(0, dag, forward, backward)
    >>> with seeded(sampler, 7):
    ...     b = sampler.sample(0, dag, forward, backward)
    >>> a == b
    True

    Notes
    -----
    - **Not thread-safe**: the stream belongs to *source*; do not share it
      across threads while inside the block.
    """
    stream = getattr(source, "random", source)
    saved = stream.get_state()

    try:
        stream.set_seed(seed)
        yield source
    finally:
        stream.set_state(saved)
