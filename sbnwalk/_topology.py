"""
_topology.py
============
An immutable, labeled binary tree topology represented as a set of parallel
numpy arrays.

Public API
----------
  Topology(labels, left_child, right_child)
      Constructor.  Arrays must be in post-order (children before parents);
      the last node is the root.

  .is_leaf(i), .children(i)
  .leaf_labels(), .join_labels()
  .is_unifurcating_root
  .newick(leaf_names=None, internal_labels=False)

Node-ID conventions (set once; never change):
  Nodes    : 0 … n_nodes-1 in post-order
  Root     : n_nodes-1
  Labels   : DAG vertex id of the leaf (taxon) or join (subsplit)

The apex may be a unifurcating join: ``right_child[root] == -1`` while
``left_child[root] != -1``.  Every other internal node has two children.
"""

import numpy as np

from sbnwalk._errors import MalformedTreeError
from sbnwalk._utils import format_newick


class Topology:
    """
    A rooted binary tree topology whose nodes carry DAG vertex ids.

    Attributes (all read-only after construction)
    ----------------------------------------------
    n_nodes   : int   Total number of nodes.
    n_leaves  : int   Number of leaf nodes.
    root      : int   Node index of the root (always n_nodes - 1).

    Arrays
    ------
    labels      : int32[n_nodes]   DAG vertex id of each node.
    parent      : int32[n_nodes]   Parent node index; -1 for root.
    left_child  : int32[n_nodes]   Left child index; -1 for leaves.
    right_child : int32[n_nodes]   Right child index; -1 for leaves and for
                                   a unifurcating root.

    Examples
    --------
    >>> t = Topology(labels=[0, 1, 4], left_child=[-1, -1, 0], right_child=[-1, -1, 1])
    >>> t.newick()
    '(0,1);'
    >>> t.newick(leaf_names={0: 'A', 1: 'B'}, internal_labels=True)
    '(A,B)4;'
    """

    def __init__(self, labels, left_child, right_child) -> None:
        labels = np.array(labels, dtype=np.int32)
        left_child = np.array(left_child, dtype=np.int32)
        right_child = np.array(right_child, dtype=np.int32)

        n_nodes = int(labels.shape[0])
        if n_nodes == 0:
            raise MalformedTreeError("A topology needs at least one node.")
        if left_child.shape != labels.shape or right_child.shape != labels.shape:
            raise MalformedTreeError(
                "labels, left_child and right_child must have equal length; got "
                f"{labels.shape[0]}, {left_child.shape[0]}, {right_child.shape[0]}"
            )

        parent = np.full(n_nodes, -1, dtype=np.int32)
        root = n_nodes - 1
        for node in range(n_nodes):
            lc = int(left_child[node])
            rc = int(right_child[node])
            if lc == -1 and rc != -1:
                raise MalformedTreeError(
                    f"Node {node} has a right child but no left child."
                )
            if lc != -1 and rc == -1 and node != root:
                raise MalformedTreeError(
                    f"Node {node} (label {int(labels[node])}) has exactly one "
                    f"child but is not the root."
                )
            for child in (lc, rc):
                if child == -1:
                    continue
                if not 0 <= child < node:
                    raise MalformedTreeError(
                        f"Child {child} of node {node} breaks post-order."
                    )
                if parent[child] != -1:
                    raise MalformedTreeError(f"Node {child} has two parents.")
                parent[child] = node

        orphans = np.flatnonzero(parent[:root] == -1)
        if orphans.size:
            raise MalformedTreeError(
                f"Nodes {orphans.tolist()} are not connected to the root."
            )

        for arr in (labels, parent, left_child, right_child):
            arr.flags.writeable = False

        self.labels = labels
        self.parent = parent
        self.left_child = left_child
        self.right_child = right_child
        self.n_nodes: int = n_nodes
        self.root: int = root
        self.n_leaves: int = int(np.count_nonzero(left_child == -1))

    # ================================================================== #
    # Public methods                                                       #
    # ================================================================== #

    def is_leaf(self, node: int) -> bool:
        return int(self.left_child[node]) == -1

    def children(self, node: int) -> tuple:
        """Child node indices of *node*: 0, 1 or 2 of them."""
        return tuple(
            int(c) for c in (self.left_child[node], self.right_child[node]) if c != -1
        )

    @property
    def is_unifurcating_root(self) -> bool:
        return (
            int(self.left_child[self.root]) != -1
            and int(self.right_child[self.root]) == -1
        )

    def leaf_labels(self) -> list:
        """Leaf labels in left-to-right order."""
        # Post-order visits leaves left to right.
        return [int(self.labels[i]) for i in range(self.n_nodes) if self.is_leaf(i)]

    def join_labels(self) -> list:
        """Internal node labels in post-order."""
        return [
            int(self.labels[i]) for i in range(self.n_nodes) if not self.is_leaf(i)
        ]

    def newick(self, leaf_names=None, internal_labels: bool = False) -> str:
        """
        Return the NEWICK string of this topology (no branch lengths).

        Parameters
        ----------
        leaf_names : sequence or mapping, optional
            ``leaf_names[label]`` gives the printed name of a leaf.  Defaults
            to the numeric label.
        internal_labels : bool
            If True, joins are followed by their DAG vertex id.

        Notes
        -----
        Built bottom-up over the post-order arrays; no recursion.
        """
        parts = [""] * self.n_nodes
        for node in range(self.n_nodes):
            label = int(self.labels[node])
            if self.is_leaf(node):
                parts[node] = (
                    str(label) if leaf_names is None else str(leaf_names[label])
                )
                continue
            inner = ",".join(parts[c] for c in self.children(node))
            parts[node] = f"({inner})" + (str(label) if internal_labels else "")
        return format_newick(parts[self.root])

    # ================================================================== #
    # Value semantics                                                      #
    # ================================================================== #

    def _key(self) -> tuple:
        return (
            self.labels.tobytes(),
            self.left_child.tobytes(),
            self.right_child.tobytes(),
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Topology):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __len__(self) -> int:
        return self.n_nodes

    def __repr__(self) -> str:
        return f"Topology({self.newick(internal_labels=True)!r})"
