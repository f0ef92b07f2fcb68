"""
_session.py
===========
Call-scoped state for one topology sample.

A ``SamplingSession`` bundles non-owning references to the DAG and the two
weight vectors with the ``SampledSubgraph`` the traversal builds.  It is
created fresh for every ``TopologySampler.sample`` call and must not outlive
the DAG and weight arrays it borrows.
"""

from typing import Dict, List, Optional

from sbnwalk._dag import Edge, SubsplitDAG
from sbnwalk._errors import MalformedTreeError, RootNotFoundError
from sbnwalk._utils import Clade, validate_weights


class SampledSubgraph:
    """
    The vertices and edges discovered during one traversal.

    Vertices keep insertion order; each is stored at most once.  Adjacency
    bookkeeping (``child``, ``parent_edge``) is only available after
    :meth:`connect_all_vertices`, and covers the sampled edges alone, never
    the rest of the DAG.
    """

    def __init__(self, dag: SubsplitDAG) -> None:
        self.dag = dag
        self._vertices: Dict[int, None] = {}
        self._edges: Dict[int, Edge] = {}
        self._children: Dict[int, List[Optional[int]]] = {}
        self._parent_edge: Dict[int, Edge] = {}
        self._connected = False

    # ------------------------------------------------------------------ #
    # Construction                                                         #
    # ------------------------------------------------------------------ #

    def add_vertex(self, vertex: int) -> None:
        """Insert *vertex* if absent.  Idempotent."""
        self._vertices.setdefault(int(vertex), None)
        self._connected = False

    def add_edge(self, edge_id: int, parent: int, child: int, clade: Clade) -> None:
        """Record a sampled edge.  A repeated edge id is ignored."""
        edge_id = int(edge_id)
        if edge_id not in self._edges:
            self._edges[edge_id] = Edge(edge_id, int(parent), int(child), Clade(clade))
        self._connected = False

    def connect_all_vertices(self) -> None:
        """
        Build parent/child bookkeeping over the visited vertices and sampled
        edges only.

        Raises
        ------
        MalformedTreeError
            If an edge touches an unvisited vertex, a vertex receives two
            rootward edges, or one clade of a vertex receives two children.
        """
        children = {v: [None, None] for v in self._vertices}
        parent_edge = {}

        for edge in self._edges.values():
            for end in (edge.parent, edge.child):
                if end not in children:
                    raise MalformedTreeError(
                        f"Sampled edge {edge.id} touches vertex {end}, which "
                        f"was never visited."
                    )
            if edge.child in parent_edge:
                raise MalformedTreeError(
                    f"Vertex {edge.child} was reached through edges "
                    f"{parent_edge[edge.child].id} and {edge.id}."
                )
            slot = children[edge.parent]
            if slot[edge.clade] is not None:
                raise MalformedTreeError(
                    f"Vertex {edge.parent} has two sampled children in its "
                    f"{edge.clade.name.lower()} clade: {slot[edge.clade]} and "
                    f"{edge.child}."
                )
            slot[edge.clade] = edge.child
            parent_edge[edge.child] = edge

        self._children = children
        self._parent_edge = parent_edge
        self._connected = True

    # ------------------------------------------------------------------ #
    # Queries                                                              #
    # ------------------------------------------------------------------ #

    def find_root(self) -> int:
        """
        Return the unique visited vertex with no sampled rootward edge.

        Raises
        ------
        RootNotFoundError
            If no such vertex exists (a cycle) or more than one does (a
            disconnected result).
        """
        self._require_connected()
        roots = [v for v in self._vertices if v not in self._parent_edge]
        if len(roots) == 1:
            return roots[0]
        if not roots:
            raise RootNotFoundError(
                f"No root found among {len(self._vertices)} sampled vertices."
            )
        raise RootNotFoundError(
            f"Sampled subgraph is disconnected: {len(roots)} candidate roots "
            f"{sorted(roots)}."
        )

    def child(self, vertex: int, clade: Clade) -> Optional[int]:
        """Sampled child of *vertex* in *clade*, or None."""
        self._require_connected()
        return self._children[vertex][clade]

    def parent_edge(self, vertex: int) -> Optional[Edge]:
        self._require_connected()
        return self._parent_edge.get(vertex)

    def __contains__(self, vertex) -> bool:
        return vertex in self._vertices

    @property
    def vertices(self) -> List[int]:
        return list(self._vertices)

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges.values())

    @property
    def n_vertices(self) -> int:
        return len(self._vertices)

    @property
    def n_edges(self) -> int:
        return len(self._edges)

    def _require_connected(self) -> None:
        if not self._connected:
            raise RuntimeError(
                "connect_all_vertices() must be called after the last "
                "add_vertex()/add_edge()."
            )


class SamplingSession:
    """
    Ephemeral state for one ``TopologySampler.sample`` call.

    Parameters
    ----------
    dag : SubsplitDAG
    forward : array-like, length dag.n_edges
        Weights for leafward (descending) choices.
    backward : array-like, length dag.n_edges
        Weights for rootward (ascending) choices.  Treated as opaque
        non-negative weights per sibling group; no normalization assumed.

    Raises
    ------
    InvalidInputError
        If either weight vector does not match ``dag.n_edges`` or holds
        negative or non-finite values.
    """

    def __init__(self, dag: SubsplitDAG, forward, backward) -> None:
        self.dag = dag
        self.forward = validate_weights(forward, dag.n_edges, "forward")
        self.backward = validate_weights(backward, dag.n_edges, "backward")
        self.result = SampledSubgraph(dag)

    @classmethod
    def from_validated(cls, dag: SubsplitDAG, forward, backward) -> "SamplingSession":
        """Skip validation for weight arrays already checked against *dag*."""
        session = cls.__new__(cls)
        session.dag = dag
        session.forward = forward
        session.backward = backward
        session.result = SampledSubgraph(dag)
        return session

