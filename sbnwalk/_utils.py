"""
_utils.py
=========
General-purpose helpers for sbnwalk.

These are standalone functions that don't depend on the main classes:
clade tags, subsplit bitset arithmetic, weight-vector validation and NEWICK
formatting.
"""

from enum import IntEnum
from typing import List

import numpy as np

from sbnwalk._errors import InvalidInputError


class Clade(IntEnum):
    """Which child partition of a subsplit an edge instantiates."""

    LEFT = 0
    RIGHT = 1

    def opposite(self) -> "Clade":
        return Clade.RIGHT if self is Clade.LEFT else Clade.LEFT


def bitset_members(mask: int) -> List[int]:
    """
    Return the indices of the set bits of *mask*, ascending.

    Examples
    --------
    >>> bitset_members(0b1011)
    [0, 1, 3]

    >>> bitset_members(0)
    []
    """
    members = []
    i = 0
    while mask:
        if mask & 1:
            members.append(i)
        mask >>= 1
        i += 1
    return members


def bitset_from_members(members) -> int:
    """
    Inverse of :func:`bitset_members`.

    >>> bitset_from_members([0, 1, 3])
    11
    """
    mask = 0
    for i in members:
        mask |= 1 << int(i)
    return mask


def validate_weights(weights, n_edges: int, name: str) -> np.ndarray:
    """
    Validate a dense edge-indexed weight vector and return it as a read-only
    contiguous float64 array.

    Parameters
    ----------
    weights : array-like
        One non-negative weight per edge id.
    n_edges : int
        Edge count of the DAG the weights index into.
    name : str
        Used in error messages ('forward' / 'backward').

    Raises
    ------
    InvalidInputError
        If the vector is not 1-D, has the wrong length, or holds negative
        or non-finite values.
    """
    arr = np.ascontiguousarray(weights, dtype=np.float64)
    if arr.ndim != 1:
        raise InvalidInputError(
            f"{name} weights must be one-dimensional, got shape {arr.shape}"
        )
    if arr.shape[0] != n_edges:
        raise InvalidInputError(
            f"{name} weights have length {arr.shape[0]} but the DAG has "
            f"{n_edges} edges"
        )
    if n_edges and not np.all(np.isfinite(arr)):
        raise InvalidInputError(f"{name} weights contain non-finite values")
    if n_edges and arr.min() < 0.0:
        raise InvalidInputError(f"{name} weights contain negative values")
    if arr is weights:
        # Never flip flags on the caller's array.
        arr = arr.view()
    arr.flags.writeable = False
    return arr


def format_newick(newick: str) -> str:
    """
    Format a NEWICK string for consistent representation.

    Ensures the NEWICK string:
    - Ends with a semicolon
    - Has no leading/trailing whitespace

    Examples
    --------
    >>> format_newick('((A,B),(C,D))')
    '((A,B),(C,D));'

    >>> format_newick('  ((A,B),C);  ')
    '((A,B),C);'
    """
    newick = newick.strip()
    if not newick.endswith(";"):
        newick += ";"
    return newick
