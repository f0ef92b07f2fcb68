"""
_random.py
==========
Seedable source of discrete-distribution draws.

One ``WeightedRandom`` owns one mutable Mersenne Twister stream
(``numpy.random.MT19937``).  It is not safe to drive one instance from
several threads at once: interleaved draws break reproducibility.  Give
each thread its own instance, or serialize access externally.
"""

from typing import Optional

import numpy as np

from sbnwalk._cpu_kernels import _discrete_index_nb, _weight_sum_nb
from sbnwalk._errors import InvalidInputError
from sbnwalk._logging import log_seed


class WeightedRandom:
    """
    Discrete-distribution sampler over non-negative weight vectors.

    Parameters
    ----------
    seed : int or None
        Initial seed.  If None, a seed is drawn from OS entropy and logged
        at INFO level so the run can be replayed.

    Attributes
    ----------
    seed : int
        The most recently applied seed.

    Examples
    --------
    >>> rng = WeightedRandom(seed=42)
    >>> rng.draw([0.0, 1.0, 0.0])
    1
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed: int = None  # type: ignore[assignment]
        self._generator: np.random.Generator = None  # type: ignore[assignment]
        if seed is None:
            entropy = int(np.random.SeedSequence().entropy)
            self._reseed(entropy, "entropy")
        else:
            self.set_seed(seed)

    def set_seed(self, seed: int) -> None:
        """
        Deterministically reinitialize the stream.

        Raises
        ------
        InvalidInputError   if *seed* is not a non-negative integer.
        """
        if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
            raise InvalidInputError(
                f"seed must be an int, got {type(seed).__name__}"
            )
        if seed < 0:
            raise InvalidInputError(f"seed must be non-negative, got {seed}")
        self._reseed(int(seed), "explicit")

    def draw(self, weights) -> int:
        """
        Return index ``i`` with probability ``weights[i] / sum(weights)``.

        Exactly one uniform variate is consumed per call.

        Parameters
        ----------
        weights : array-like of float
            Non-negative weights; at least one must be positive.

        Returns
        -------
        int   Selected index.  Zero-weight entries are never selected.

        Raises
        ------
        InvalidInputError
            If *weights* is empty, contains negative or non-finite values, or
            sums to zero.
        """
        w = np.ascontiguousarray(weights, dtype=np.float64)
        if w.ndim != 1 or w.shape[0] == 0:
            raise InvalidInputError("weights must be a non-empty 1-D vector")
        if not np.all(np.isfinite(w)):
            raise InvalidInputError(f"weights contain non-finite values: {w}")
        if w.min() < 0.0:
            raise InvalidInputError(f"weights contain negative values: {w}")

        peak = w.max()
        if not peak > 0.0:
            raise InvalidInputError(
                f"weights sum to zero; a sibling group needs at least one "
                f"strictly positive weight: {w}"
            )

        # Only relative sizes matter. Scaling by the peak keeps the sum finite.
        w = w / peak
        total = _weight_sum_nb(w)

        u = self._generator.random()
        return int(_discrete_index_nb(w, total, u))

    def get_state(self) -> dict:
        """Snapshot of the generator state, for :meth:`set_state`."""
        return {"seed": self.seed, "bit_generator": self._generator.bit_generator.state}

    def set_state(self, state: dict) -> None:
        """Restore a snapshot taken with :meth:`get_state`."""
        self.seed = state["seed"]
        self._generator.bit_generator.state = state["bit_generator"]

    def _reseed(self, seed: int, source: str) -> None:
        self.seed = seed
        self._generator = np.random.Generator(np.random.MT19937(seed))
        log_seed(seed, source)

    def __repr__(self) -> str:
        return f"WeightedRandom(seed={self.seed})"
