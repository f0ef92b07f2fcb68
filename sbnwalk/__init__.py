"""
sbnwalk
=======

Weighted bidirectional sampling of tree topologies from subsplit DAGs.

A subsplit DAG compactly represents many candidate phylogenetic topologies
that share substructure.  *sbnwalk* draws one concrete bifurcating tree from
it by a weighted random walk that explores toward the root and toward the
leaves at once, starting from any vertex.

Main Classes
------------
TopologySampler : Seedable sampler; .sample(), .sample_many(), .topology_counts()
SubsplitDAG : Read-only subsplit DAG the sampler walks
Topology : Immutable labeled binary tree returned by the sampler
WeightedRandom : Seedable discrete-distribution source

Context Managers
----------------
quiet : Suppress sbnwalk logging
suppress_logger : Suppress specific logger
suppress_warnings : Suppress specific warnings
seeded : Reseed a sampler for a block, then restore its stream

Errors
------
SamplerError : Base class
InvalidInputError : Bad weights (length, sign, zero-sum group) or DAG arguments
RootNotFoundError : No unique root in the sampled subgraph
MalformedTreeError : Sampled subgraph is not a binary tree

Examples
--------
Four taxa, one topology ((A,B),(C,D)):

>>> from sbnwalk import SubsplitDAG, TopologySampler
>>> dag = SubsplitDAG(
...     subsplits=[(0b0001, 0), (0b0010, 0), (0b0100, 0), (0b1000, 0),
...                (0b0001, 0b0010), (0b0100, 0b1000), (0b0011, 0b1100)],
...     edges=[(6, 4, 0), (6, 5, 1), (4, 0, 0), (4, 1, 1), (5, 2, 0), (5, 3, 1)],
...     taxon_names=['A', 'B', 'C', 'D'],
... )
>>> sampler = TopologySampler(seed=0)
>>> tree = sampler.sample(0, dag, [1.0] * 6, [1.0] * 6)
>>> tree.newick(leaf_names=dag.leaf_names())
'((A,B),(C,D));'
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Main classes
from ._sampler import TopologySampler, Discovery, Known, build_topology
from ._dag import SubsplitDAG, Edge
from ._topology import Topology
from ._random import WeightedRandom
from ._session import SamplingSession, SampledSubgraph

# Errors
from ._errors import (
    SamplerError,
    InvalidInputError,
    RootNotFoundError,
    MalformedTreeError,
)

# Context managers (user-facing utilities)
from ._context import (
    suppress_logger,
    quiet,
    suppress_warnings,
    seeded,
)

# Utilities
from ._utils import (
    Clade,
    bitset_members,
    bitset_from_members,
    format_newick,
)

# Public API
__all__ = [
    # Main classes
    "TopologySampler",
    "SubsplitDAG",
    "Edge",
    "Topology",
    "WeightedRandom",
    "SamplingSession",
    "SampledSubgraph",
    "Discovery",
    "Known",
    "build_topology",
    # Errors
    "SamplerError",
    "InvalidInputError",
    "RootNotFoundError",
    "MalformedTreeError",
    # Context managers
    "suppress_logger",
    "quiet",
    "suppress_warnings",
    "seeded",
    # Utilities
    "Clade",
    "bitset_members",
    "bitset_from_members",
    "format_newick",
    # Version info
    "__version__",
]
