"""
_dag.py
=======
A read-only subsplit DAG exposing exactly the interface the topology sampler
consumes.

Public API
----------
  SubsplitDAG(subsplits, edges, taxon_names=None)
      Constructor.  Vertices are given by their subsplit bitsets; edges as
      (parent, child, clade) triples whose position is the edge id.

  .rootward(v, clade)   -> list[(parent_id, edge_id)]
  .leafward(v, clade)   -> list[(child_id, edge_id)]
  .is_root(v), .is_leaf(v), .roots(), .leaves()
  .subsplit(v), .edge(e), .taxon_set()

Building a DAG from a collection of trees is not done here; callers assemble
the vertex and edge lists themselves.

Memory layout
-------------
Edge endpoints and clade tags are stored in flat int32/int8 numpy arrays
indexed by edge id (``edge_parent``, ``edge_child``, ``edge_clade``).
Per-vertex adjacency is kept as Python lists of (neighbor, edge) tuples, one
list per (direction, clade), since the sampler only ever walks them.
"""

from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from sbnwalk._errors import InvalidInputError
from sbnwalk._logging import log_dag_summary
from sbnwalk._utils import Clade, bitset_members


class Edge(NamedTuple):
    """One DAG edge: *child* occupies *clade* of *parent*."""

    id: int
    parent: int
    child: int
    clade: Clade


class SubsplitDAG:
    """
    An immutable subsplit DAG.

    Parameters
    ----------
    subsplits : sequence of (int, int)
        ``subsplits[v] = (left_mask, right_mask)`` for vertex id ``v``.  Bit
        ``i`` of a mask is set when taxon ``i`` belongs to that clade.  Leaf
        vertices conventionally carry ``(1 << taxon, 0)``.
    edges : sequence of (int, int, int)
        ``(parent, child, clade)`` triples.  The position in the sequence is
        the edge id, which indexes the sampler's weight vectors.
    taxon_names : sequence of str, optional
        Name of each taxon bit.  Defaults to ``'t0', 't1', ...``.

    Attributes (all read-only after construction)
    ----------------------------------------------
    n_vertices : int
    n_edges    : int
    n_taxa     : int        Highest set bit across all subsplits, plus one.
    taxon_names : list[str]
    edge_parent : int32[n_edges]
    edge_child  : int32[n_edges]
    edge_clade  : int8 [n_edges]

    Raises
    ------
    InvalidInputError
        On negative masks, out-of-range vertex ids, self loops, unknown
        clade values, or duplicate (parent, child, clade) triples.

    Examples
    --------
    A 3-taxon DAG holding the single topology ((A,B),C):

    >>> dag = SubsplitDAG(
    ...     subsplits=[(0b001, 0), (0b010, 0), (0b100, 0),
    ...                (0b001, 0b010), (0b011, 0b100)],
    ...     edges=[(4, 3, 0), (4, 2, 1), (3, 0, 0), (3, 1, 1)],
    ...     taxon_names=['A', 'B', 'C'],
    ... )
    >>> dag.roots()
    [4]
    """

    def __init__(
        self,
        subsplits: Sequence[Tuple[int, int]],
        edges: Sequence[Tuple[int, int, int]],
        taxon_names: Optional[Sequence[str]] = None,
    ) -> None:
        self._subsplits = self._normalize_subsplits(subsplits)
        self.n_vertices: int = len(self._subsplits)

        taxa_mask = 0
        for left, right in self._subsplits:
            taxa_mask |= left | right
        self.n_taxa: int = taxa_mask.bit_length()

        if taxon_names is None:
            self.taxon_names = [f"t{i}" for i in range(self.n_taxa)]
        else:
            self.taxon_names = [str(name) for name in taxon_names]
            if len(self.taxon_names) < self.n_taxa:
                raise InvalidInputError(
                    f"{len(self.taxon_names)} taxon names given for "
                    f"{self.n_taxa} taxa"
                )
            self.n_taxa = len(self.taxon_names)

        self._build_edges(edges)

        log_dag_summary(
            self.n_taxa,
            self.n_vertices,
            self.n_edges,
            len(self.roots()),
            len(self.leaves()),
        )

    # ================================================================== #
    # Public methods                                                       #
    # ================================================================== #

    def has_vertex(self, vertex) -> bool:
        try:
            self._check_vertex(vertex)
        except KeyError:
            return False
        return True

    def subsplit(self, vertex: int) -> Tuple[int, int]:
        """Return ``(left_mask, right_mask)`` of *vertex*."""
        return self._subsplits[self._check_vertex(vertex)]

    def edge(self, edge_id: int) -> Edge:
        """Return the :class:`Edge` with id *edge_id*."""
        e = int(edge_id)
        if not 0 <= e < self.n_edges:
            raise KeyError(f"No edge with id {edge_id} in DAG ({self.n_edges} edges).")
        return Edge(
            e,
            int(self.edge_parent[e]),
            int(self.edge_child[e]),
            Clade(int(self.edge_clade[e])),
        )

    def rootward(self, vertex: int, clade: Clade) -> List[Tuple[int, int]]:
        """
        Parents of *vertex* through which it occupies *clade* of the parent,
        as ``(parent_id, edge_id)`` pairs in edge-id order.
        """
        return self._rootward[self._check_vertex(vertex)][clade]

    def leafward(self, vertex: int, clade: Clade) -> List[Tuple[int, int]]:
        """
        Children of *vertex* in its *clade*, as ``(child_id, edge_id)`` pairs
        in edge-id order.
        """
        return self._leafward[self._check_vertex(vertex)][clade]

    def is_root(self, vertex: int) -> bool:
        v = self._check_vertex(vertex)
        return not self._rootward[v][Clade.LEFT] and not self._rootward[v][Clade.RIGHT]

    def is_leaf(self, vertex: int) -> bool:
        v = self._check_vertex(vertex)
        return not self._leafward[v][Clade.LEFT] and not self._leafward[v][Clade.RIGHT]

    def roots(self) -> List[int]:
        return [v for v in range(self.n_vertices) if self.is_root(v)]

    def leaves(self) -> List[int]:
        return [v for v in range(self.n_vertices) if self.is_leaf(v)]

    def taxon_set(self) -> List[int]:
        """Taxon indices covered by the DAG's leaf vertices, ascending."""
        mask = 0
        for v in self.leaves():
            left, right = self._subsplits[v]
            mask |= left | right
        return bitset_members(mask)

    def leaf_names(self) -> dict:
        """
        Map each leaf vertex id to the name of the taxon it carries, for use
        as ``Topology.newick(leaf_names=...)``.
        """
        names = {}
        for v in self.leaves():
            left, right = self._subsplits[v]
            members = bitset_members(left | right)
            if len(members) == 1:
                names[v] = self.taxon_names[members[0]]
            else:
                names[v] = str(v)
        return names

    def __repr__(self) -> str:
        return (
            f"SubsplitDAG(n_taxa={self.n_taxa}, n_vertices={self.n_vertices}, "
            f"n_edges={self.n_edges})"
        )

    # ================================================================== #
    # Private instance methods                                             #
    # ================================================================== #

    @staticmethod
    def _normalize_subsplits(subsplits) -> List[Tuple[int, int]]:
        normalized = []
        for v, pair in enumerate(subsplits):
            if len(pair) != 2:
                raise InvalidInputError(
                    f"Subsplit for vertex {v} must be a (left, right) pair, "
                    f"got {pair!r}"
                )
            left, right = int(pair[0]), int(pair[1])
            if left < 0 or right < 0:
                raise InvalidInputError(
                    f"Subsplit masks for vertex {v} must be non-negative"
                )
            normalized.append((left, right))
        return normalized

    def _build_edges(self, edges) -> None:
        """
        **Private.**  Validate the edge triples and populate the flat edge
        arrays and the per-vertex adjacency lists.
        """
        edges = list(edges)
        n_edges = len(edges)

        edge_parent = np.empty(n_edges, dtype=np.int32)
        edge_child = np.empty(n_edges, dtype=np.int32)
        edge_clade = np.empty(n_edges, dtype=np.int8)

        rootward = [([], []) for _ in range(self.n_vertices)]
        leafward = [([], []) for _ in range(self.n_vertices)]
        seen = set()

        for e, triple in enumerate(edges):
            if len(triple) != 3:
                raise InvalidInputError(
                    f"Edge {e} must be a (parent, child, clade) triple, got {triple!r}"
                )
            parent, child, clade = int(triple[0]), int(triple[1]), triple[2]
            for end in (parent, child):
                if not 0 <= end < self.n_vertices:
                    raise InvalidInputError(
                        f"Edge {e} refers to vertex {end}, outside "
                        f"[0, {self.n_vertices})"
                    )
            if parent == child:
                raise InvalidInputError(f"Edge {e} is a self loop on vertex {parent}")
            try:
                clade = Clade(int(clade))
            except (TypeError, ValueError):
                raise InvalidInputError(
                    f"Edge {e} has clade {triple[2]!r}; expected 0 (left) or 1 (right)"
                )
            key = (parent, child, clade)
            if key in seen:
                raise InvalidInputError(f"Edge {e} duplicates {key}")
            seen.add(key)

            edge_parent[e] = parent
            edge_child[e] = child
            edge_clade[e] = clade
            leafward[parent][clade].append((child, e))
            rootward[child][clade].append((parent, e))

        for arr in (edge_parent, edge_child, edge_clade):
            arr.flags.writeable = False

        self.n_edges: int = n_edges
        self.edge_parent = edge_parent
        self.edge_child = edge_child
        self.edge_clade = edge_clade
        self._rootward = rootward
        self._leafward = leafward

    def _check_vertex(self, vertex) -> int:
        if isinstance(vertex, (int, np.integer)) and not isinstance(vertex, bool):
            v = int(vertex)
            if 0 <= v < self.n_vertices:
                return v
        raise KeyError(
            f"No vertex with id {vertex!r} in DAG ({self.n_vertices} vertices)."
        )

