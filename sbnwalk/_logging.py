"""
_logging.py
===========
Logging functions for sbnwalk.

All functions in this module have NO side effects except logging. They take
computed data as parameters and format/emit log messages.

This separation ensures:
- Logging can be easily disabled/mocked in tests
- Computation is separate from presentation
"""

import logging
from typing import Optional


logger = logging.getLogger(__name__)


# ============================================================================ #
# System logging (called at module import time)
# ============================================================================ #


def log_numba_status() -> None:
    """
    Log numba/llvmlite versions and threading configuration at INFO level.

    Called once when the sampler module is first imported.
    """
    import platform

    import numba

    logger.info(
        f"System: {platform.machine()} ({platform.system()}), "
        f"Python {platform.python_version()}"
    )
    logger.info(f"Numba {numba.__version__} loaded successfully")

    try:
        import llvmlite

        logger.info(f"LLVM backend: llvmlite {llvmlite.__version__}")
    except (ImportError, AttributeError):
        pass  # LLVM version unavailable

    try:
        logger.info(f"Numba threads available: {numba.get_num_threads()}")
    except Exception:
        pass  # Threading info unavailable in some configs


def install_numba_warning_filter() -> None:
    """
    Route NumbaPerformanceWarning through our logger at WARNING level so it
    appears in the same stream as other sbnwalk diagnostics.
    """
    import warnings

    from numba.core.errors import NumbaPerformanceWarning

    original_showwarning = warnings.showwarning

    def custom_showwarning(message, category, filename, lineno, file=None, line=None):
        if issubclass(category, NumbaPerformanceWarning):
            logger.warning(f"Numba performance issue: {message}")
            logger.warning(f"  at {filename}:{lineno}")
            return
        original_showwarning(message, category, filename, lineno, file, line)

    warnings.showwarning = custom_showwarning


# ============================================================================ #
# Random source logging
# ============================================================================ #


def log_seed(seed: int, source: str) -> None:
    """
    Log a (re)seed of a random stream.

    Parameters
    ----------
    seed : int
        The seed now driving the stream.
    source : str
        'explicit' when supplied by the caller, 'entropy' when drawn from the
        OS.  Entropy seeds are logged so a run can be replayed.
    """
    if source == "entropy":
        logger.info("Random stream seeded from OS entropy: seed=%d", seed)
    else:
        logger.debug("Random stream seeded explicitly: seed=%d", seed)


# ============================================================================ #
# DAG and sampling logging
# ============================================================================ #


def log_dag_summary(
    n_taxa: int, n_vertices: int, n_edges: int, n_roots: int, n_leaves: int
) -> None:
    """
    Log the shape of a newly built subsplit DAG.

    Parameters
    ----------
    n_taxa : int
        Width of the taxon bitsets.
    n_vertices, n_edges : int
        DAG size.
    n_roots, n_leaves : int
        Vertices with no rootward / no leafward edges.
    """
    logger.info(
        "Subsplit DAG built: %d taxa, %d vertices, %d edges",
        n_taxa,
        n_vertices,
        n_edges,
    )
    logger.info("  %d root vertex(es), %d leaf vertex(es)", n_roots, n_leaves)

    if n_roots > 1:
        logger.warning(
            "DAG has %d vertices with no rootward edges. Samples started in "
            "different components will be rooted differently.",
            n_roots,
        )
    if n_leaves != n_taxa:
        logger.warning(
            "DAG has %d leaf vertices for %d taxa; sampled trees may not "
            "cover the full taxon set.",
            n_leaves,
            n_taxa,
        )


def log_sample_summary(
    start: int, n_vertices: int, n_edges: int, root: Optional[int]
) -> None:
    """Log one completed traversal at DEBUG level."""
    logger.debug(
        "Sampled from vertex %d: %d vertices, %d edges, root=%s",
        start,
        n_vertices,
        n_edges,
        root,
    )


def log_batch_summary(n_samples: int, n_unique: int) -> None:
    """
    Log the outcome of a batch of samples.

    Parameters
    ----------
    n_samples : int
        Number of topologies drawn.
    n_unique : int
        Number of distinct topologies among them.
    """
    logger.info(
        "Drew %d topologies, %d distinct (%.1f%%)",
        n_samples,
        n_unique,
        100.0 * n_unique / n_samples if n_samples else 0.0,
    )
