"""
_errors.py
==========
Exception taxonomy for sbnwalk.

Every failure raised by the sampler is fatal for the current call: no retry,
no partial tree.  Each class also derives from the builtin a caller would
naturally catch, so ``except ValueError`` keeps working for callers that do
not import this module.

  InvalidInputError   (ValueError)   weight-vector shape or zero-sum group
  RootNotFoundError   (LookupError)  no unique root in the sampled subgraph
  MalformedTreeError  (ValueError)   sampled subgraph is not a binary tree
"""


class SamplerError(Exception):
    """Base class for all sbnwalk errors."""


class InvalidInputError(SamplerError, ValueError):
    """
    Raised when the caller supplies inputs the sampler cannot use: weight
    vectors whose length differs from the DAG's edge count, a sibling edge
    group whose weights sum to zero, negative or non-finite weights, or
    inconsistent DAG construction arguments.
    """


class RootNotFoundError(SamplerError, LookupError):
    """
    Raised when the sampled subgraph has no unique vertex without a rootward
    edge.  Implies a malformed, cyclic, or disconnected DAG.
    """


class MalformedTreeError(SamplerError, ValueError):
    """
    Raised when the sampled subgraph cannot be read back as a binary tree,
    e.g. a vertex with exactly one child that is neither the root nor a leaf.
    """
