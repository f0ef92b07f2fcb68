"""
_cpu_kernels.py
===============
numba-compiled inner loops for sbnwalk.

This module contains ONLY numba-accelerated code and should not import other
project modules to avoid import-time complications.

Exported Functions
------------------
_discrete_index_nb : njit function
    Map one uniform variate onto an index of a non-negative weight vector.

_weight_sum_nb : njit function
    Sum of a weight vector (float64 accumulation, left to right).

Notes
-----
- Validation (negative / non-finite / zero-sum weights) happens in the
  Python caller; kernels assume clean input.
- cache=True persists compiled binary to disk for faster subsequent runs
"""

from numba import njit


@njit(cache=True)
def _weight_sum_nb(weights):
    total = 0.0
    for i in range(weights.shape[0]):
        total += weights[i]
    return total


@njit(cache=True)
def _discrete_index_nb(weights, total, u):
    """
    Return the index i such that the cumulative weight up to i first exceeds
    ``u * total``.

    Parameters
    ----------
    weights : float64[n]   Non-negative weights, at least one positive.
    total   : float64      Sum of *weights* (from ``_weight_sum_nb``).
    u       : float64      Uniform variate in [0, 1).

    Returns
    -------
    int   Selected index.  Zero-weight entries are never returned; if
          rounding leaves the target at or beyond the running sum, the last
          positive-weight index is returned.
    """
    target = u * total
    acc = 0.0
    last = -1
    for i in range(weights.shape[0]):
        w = weights[i]
        if w > 0.0:
            acc += w
            last = i
            if target < acc:
                return i
    return last
