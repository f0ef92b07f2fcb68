"""
_sampler.py
===========
Bidirectional topology sampling on a subsplit DAG.

Public API
----------
  TopologySampler(seed=None)
      Owns one seedable random stream.

  .set_seed(seed)
  .sample(start, dag, forward, backward)              -> Topology
  .sample_many(count, start, dag, forward, backward)  -> list[Topology]
  .topology_counts(count, start, dag, forward, backward, leaf_names=None)
                                                      -> Counter[str]

  build_topology(result, root)                        -> Topology

Algorithm
---------
Starting from an arbitrary vertex, the walk samples one path up to the DAG
root and one full subtree below every clade it touches.  Each newly found
vertex is dispatched on which side of it is already known:

  leafward-known (found as a parent, via clade c)
      ascend from it, and descend into its opposite clade.
  rootward-known (found as a child)
      descend into both of its clades.

The unknown side is always the one explored, so no vertex is visited twice.
Branch points are resolved by a weighted draw: ``backward`` weights over the
union of both clades' parents when ascending, ``forward`` weights over one
clade's children when descending.

Logging
-------
  logging.getLogger('sbnwalk._sampler')
      INFO level:    numba status on import, batch summaries.
      DEBUG level:   per-sample vertex/edge counts and root.

Notes
-----
The walk runs on an explicit LIFO work stack rather than Python recursion.
Pending steps are pushed in reverse so they pop in exactly the order a
depth-first recursive walk would perform them, which keeps the draw sequence
(and hence the output for a fixed seed) identical to the recursive
formulation while lifting the interpreter's recursion limit.
"""

import logging
from collections import Counter
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from sbnwalk._dag import SubsplitDAG
from sbnwalk._errors import InvalidInputError, MalformedTreeError
from sbnwalk._logging import (
    install_numba_warning_filter,
    log_batch_summary,
    log_numba_status,
    log_sample_summary,
)
from sbnwalk._random import WeightedRandom
from sbnwalk._session import SampledSubgraph, SamplingSession
from sbnwalk._topology import Topology
from sbnwalk._utils import Clade


logger = logging.getLogger(__name__)


# Log numba status on module import
log_numba_status()
install_numba_warning_filter()


class Known(Enum):
    """Which side of a newly discovered vertex is already in the result."""

    LEAFWARD = "leafward"
    ROOTWARD = "rootward"


class Discovery(NamedTuple):
    """
    Tagged discovery state.  ``clade`` is the clade through which a
    leafward-known vertex was reached; it is None for rootward-known.
    """

    side: Known
    clade: Optional[Clade] = None

    @classmethod
    def leafward(cls, clade: Clade) -> "Discovery":
        return cls(Known.LEAFWARD, Clade(clade))

    @classmethod
    def rootward(cls) -> "Discovery":
        return cls(Known.ROOTWARD)


# Work-stack opcodes
_ASCEND = 0
_DESCEND = 1


class TopologySampler:
    """
    Draws tree topologies from a subsplit DAG by a weighted bidirectional
    walk.

    Parameters
    ----------
    seed : int or None
        Seed for the owned random stream.  If None, the stream is seeded
        from OS entropy (the seed is logged).  Call :meth:`set_seed` before
        any sample whose output must be reproducible.

    Notes
    -----
    One sampler owns one stream and is not safe to call from several
    threads at once.  The DAG and weight vectors are only read, so any
    number of samplers (one per thread) may share them.

    Examples
    --------
    >>> sampler = TopologySampler(seed=1)
    >>> tree = sampler.sample(0, dag, forward, backward)
    >>> tree.newick(leaf_names=dag.leaf_names())
    '((A,B),(C,D));'
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._random = WeightedRandom(seed)

    @property
    def random(self) -> WeightedRandom:
        return self._random

    def set_seed(self, seed: int) -> None:
        """Deterministically reinitialize the sampler's random stream."""
        self._random.set_seed(seed)

    # ================================================================== #
    # Public sampling API                                                  #
    # ================================================================== #

    def sample(self, start: int, dag: SubsplitDAG, forward, backward) -> Topology:
        """
        Sample one tree topology containing *start*.

        Parameters
        ----------
        start : int
            Vertex id the walk starts from.
        dag : SubsplitDAG
        forward : array-like of float, length dag.n_edges
            Leafward weights.
        backward : array-like of float, length dag.n_edges
            Rootward weights.

        Returns
        -------
        Topology
            Leaves labelled by leaf vertex id, joins by subsplit vertex id.

        Raises
        ------
        KeyError            if *start* is not a vertex of *dag*.
        InvalidInputError   on weight-length mismatch or a zero-sum sibling
                            group encountered during the walk.
        RootNotFoundError   if the sampled subgraph has no unique root.
        MalformedTreeError  if the sampled subgraph is not a binary tree.
        """
        session = SamplingSession(dag, forward, backward)
        return self._sample_session(session, start)

    def sample_many(
        self, count: int, start: int, dag: SubsplitDAG, forward, backward
    ) -> List[Topology]:
        """
        Draw *count* independent topologies from one stream.

        Weight vectors are validated once for the whole batch.
        """
        if isinstance(count, bool) or not isinstance(count, (int, np.integer)):
            raise InvalidInputError(f"count must be a positive int, got {count!r}")
        if count <= 0:
            raise InvalidInputError(f"count must be a positive int, got {count!r}")
        count = int(count)

        checked = SamplingSession(dag, forward, backward)
        trees = []
        for _ in range(count):
            session = SamplingSession.from_validated(
                dag, checked.forward, checked.backward
            )
            trees.append(self._sample_session(session, start))

        log_batch_summary(count, len(set(trees)))
        return trees

    def topology_counts(
        self,
        count: int,
        start: int,
        dag: SubsplitDAG,
        forward,
        backward,
        leaf_names=None,
    ) -> Counter:
        """
        Sample *count* topologies and tally them by NEWICK string.

        Parameters
        ----------
        leaf_names : sequence or mapping, optional
            Passed to :meth:`Topology.newick`.  Defaults to
            ``dag.leaf_names()``.

        Returns
        -------
        collections.Counter
            NEWICK (topology only, no internal labels) -> number of draws.
        """
        if leaf_names is None:
            leaf_names = dag.leaf_names()
        trees = self.sample_many(count, start, dag, forward, backward)
        return Counter(tree.newick(leaf_names=leaf_names) for tree in trees)

    # ================================================================== #
    # Traversal                                                            #
    # ================================================================== #

    def _sample_session(self, session: SamplingSession, start) -> Topology:
        dag = session.dag
        if not dag.has_vertex(start):
            raise KeyError(
                f"Start vertex {start!r} is not in the DAG "
                f"({dag.n_vertices} vertices)."
            )
        start = int(start)

        # Neither side of the start vertex is known: explore all three.
        session.result.add_vertex(start)
        stack = [
            (_DESCEND, start, Clade.RIGHT),
            (_DESCEND, start, Clade.LEFT),
            (_ASCEND, start, None),
        ]
        while stack:
            op, vertex, clade = stack.pop()
            if op == _ASCEND:
                self._sample_rootward(session, vertex, stack)
            else:
                self._sample_leafward(session, vertex, clade, stack)

        result = session.result
        result.connect_all_vertices()
        root = result.find_root()
        log_sample_summary(start, result.n_vertices, result.n_edges, root)
        return build_topology(result, root)

    def _visit(
        self, session: SamplingSession, vertex: int, discovery: Discovery, stack
    ) -> None:
        """Add a newly found vertex and schedule exploration of its unknown side."""
        if vertex in session.result:
            # Only a cyclic or clade-inconsistent DAG leads back to a visited
            # vertex.  The edge is kept so reconstruction rejects the result.
            return
        session.result.add_vertex(vertex)
        if discovery.side is Known.ROOTWARD:
            stack.append((_DESCEND, vertex, Clade.RIGHT))
            stack.append((_DESCEND, vertex, Clade.LEFT))
        else:
            stack.append((_DESCEND, vertex, discovery.clade.opposite()))
            stack.append((_ASCEND, vertex, None))

    def _sample_rootward(self, session: SamplingSession, vertex: int, stack) -> None:
        dag = session.dag
        candidates = dag.rootward(vertex, Clade.LEFT) + dag.rootward(
            vertex, Clade.RIGHT
        )
        if not candidates:
            return  # reached the root

        parent, edge_id = self._select(
            candidates, session.backward, vertex, "rootward"
        )
        edge = dag.edge(edge_id)
        session.result.add_edge(edge.id, edge.parent, edge.child, edge.clade)
        self._visit(session, parent, Discovery.leafward(edge.clade), stack)

    def _sample_leafward(
        self, session: SamplingSession, vertex: int, clade: Clade, stack
    ) -> None:
        dag = session.dag
        candidates = dag.leafward(vertex, clade)
        if not candidates:
            return  # reached a leaf along this clade

        child, edge_id = self._select(candidates, session.forward, vertex, "leafward")
        edge = dag.edge(edge_id)
        session.result.add_edge(edge.id, edge.parent, edge.child, edge.clade)
        self._visit(session, child, Discovery.rootward(), stack)

    def _select(
        self, candidates: List[Tuple[int, int]], weights, vertex: int, direction: str
    ) -> Tuple[int, int]:
        """
        Weighted choice of one ``(neighbor, edge_id)`` pair, weighting each
        candidate by ``weights[edge_id]``.
        """
        group = weights[[edge_id for _, edge_id in candidates]]
        try:
            index = self._random.draw(group)
        except InvalidInputError as err:
            raise InvalidInputError(
                f"Cannot sample {direction} from vertex {vertex}: edges "
                f"{[edge_id for _, edge_id in candidates]}: {err}"
            ) from err
        return candidates[index]

    def __repr__(self) -> str:
        return f"TopologySampler(seed={self._random.seed})"


# ======================================================================== #
# Reconstruction                                                            #
# ======================================================================== #


def build_topology(result: SampledSubgraph, root: int) -> Topology:
    """
    Convert a connected sampled subgraph into a :class:`Topology`.

    Each vertex is classified by its children *within the result*:

      both clades present              → binary join labelled with the vertex
      neither present, DAG leaf        → leaf labelled with the vertex
      exactly one present, DAG root    → unifurcating join
      anything else                    → MalformedTreeError

    Two-phase stack
    ---------------
    phase 0  First visit: classify, then schedule children.
    phase 1  Children packed: append this node (post-order).

    Raises
    ------
    MalformedTreeError
        On a non-root vertex with one child, a non-leaf vertex with none, a
        vertex reached twice, or vertices unreachable from *root*.
    """
    dag = result.dag
    labels = []
    left_child = []
    right_child = []
    index_of = {}

    stack = [(root, 0)]
    while stack:
        vertex, phase = stack.pop()
        left = result.child(vertex, Clade.LEFT)
        right = result.child(vertex, Clade.RIGHT)
        present = [c for c in (left, right) if c is not None]

        if phase == 0:
            if vertex in index_of:
                raise MalformedTreeError(f"Vertex {vertex} is reached twice.")
            if len(present) == 1 and not dag.is_root(vertex):
                raise MalformedTreeError(
                    f"Vertex {vertex} has only one child ({present[0]}) but is "
                    f"neither the root nor a leaf."
                )
            if not present and not dag.is_leaf(vertex):
                raise MalformedTreeError(
                    f"Vertex {vertex} has no sampled children but is not a "
                    f"leaf of the DAG."
                )
            stack.append((vertex, 1))
            for child in reversed(present):
                stack.append((child, 0))
            continue

        index_of[vertex] = len(labels)
        labels.append(vertex)
        if len(present) == 2:
            left_child.append(index_of[left])
            right_child.append(index_of[right])
        elif len(present) == 1:
            left_child.append(index_of[present[0]])
            right_child.append(-1)
        else:
            left_child.append(-1)
            right_child.append(-1)

    if len(labels) != result.n_vertices:
        unreached = sorted(set(result.vertices) - set(index_of))
        raise MalformedTreeError(
            f"Vertices {unreached} are not reachable from root {root}."
        )

    return Topology(labels, left_child, right_child)
