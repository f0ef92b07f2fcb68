"""
tests/test_session.py
=====================
Tests for SampledSubgraph bookkeeping, SamplingSession weight validation and
the weight-vector helper.
"""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from sbnwalk._errors import InvalidInputError, MalformedTreeError, RootNotFoundError
from sbnwalk._session import SampledSubgraph, SamplingSession
from sbnwalk._utils import Clade, validate_weights

from dags import cherry_dag


@pytest.fixture(scope="module")
def cherry():
    return cherry_dag()


# ======================================================================== #
# SampledSubgraph                                                           #
# ======================================================================== #


class TestSampledSubgraph:
    def test_add_vertex_idempotent(self, cherry):
        result = SampledSubgraph(cherry)
        for v in (6, 4, 6, 0, 4):
            result.add_vertex(v)
        assert result.vertices == [6, 4, 0]
        assert result.n_vertices == 3
        assert 4 in result
        assert 5 not in result

    def test_repeated_edge_ignored(self, cherry):
        result = SampledSubgraph(cherry)
        result.add_edge(2, 4, 0, Clade.LEFT)
        result.add_edge(2, 4, 0, Clade.LEFT)
        assert result.n_edges == 1
        assert result.edges[0].clade is Clade.LEFT

    def test_queries_require_connect(self, cherry):
        result = SampledSubgraph(cherry)
        result.add_vertex(0)
        with pytest.raises(RuntimeError):
            result.find_root()
        result.connect_all_vertices()
        assert result.find_root() == 0
        result.add_vertex(1)
        with pytest.raises(RuntimeError):
            result.child(0, Clade.LEFT)

    def test_connect(self, cherry):
        result = SampledSubgraph(cherry)
        for v in (4, 0, 1):
            result.add_vertex(v)
        result.add_edge(2, 4, 0, 0)
        result.add_edge(3, 4, 1, 1)
        result.connect_all_vertices()
        assert result.child(4, Clade.LEFT) == 0
        assert result.child(4, Clade.RIGHT) == 1
        assert result.parent_edge(1).id == 3
        assert result.parent_edge(4) is None
        assert result.find_root() == 4

    def test_edge_to_unvisited_vertex(self, cherry):
        result = SampledSubgraph(cherry)
        result.add_vertex(4)
        result.add_edge(2, 4, 0, 0)
        with pytest.raises(MalformedTreeError, match="never visited"):
            result.connect_all_vertices()

    def test_two_parents(self):
        result = SampledSubgraph(cherry_dag())
        for v in (4, 5, 0):
            result.add_vertex(v)
        result.add_edge(0, 4, 0, 0)
        result.add_edge(1, 5, 0, 0)
        with pytest.raises(MalformedTreeError, match="reached through edges"):
            result.connect_all_vertices()

    def test_two_children_in_one_clade(self, cherry):
        result = SampledSubgraph(cherry)
        for v in (4, 0, 1):
            result.add_vertex(v)
        result.add_edge(2, 4, 0, 0)
        result.add_edge(3, 4, 1, 0)
        with pytest.raises(MalformedTreeError, match="left clade"):
            result.connect_all_vertices()

    def test_no_root(self, cherry):
        result = SampledSubgraph(cherry)
        for v in (4, 0):
            result.add_vertex(v)
        result.add_edge(2, 4, 0, 0)
        result.add_edge(9, 0, 4, 1)
        result.connect_all_vertices()
        with pytest.raises(RootNotFoundError, match="No root"):
            result.find_root()

    def test_several_roots(self, cherry):
        result = SampledSubgraph(cherry)
        for v in (4, 5):
            result.add_vertex(v)
        result.connect_all_vertices()
        with pytest.raises(RootNotFoundError, match="disconnected"):
            result.find_root()

    def test_root_not_found_is_lookup_error(self, cherry):
        result = SampledSubgraph(cherry)
        result.connect_all_vertices()
        with pytest.raises(LookupError):
            result.find_root()


# ======================================================================== #
# SamplingSession                                                           #
# ======================================================================== #


class TestSamplingSession:
    def test_weights_become_read_only_arrays(self, cherry):
        session = SamplingSession(cherry, [1] * 6, np.ones(6))
        assert session.forward.dtype == np.float64
        assert not session.forward.flags.writeable
        assert not session.backward.flags.writeable
        assert session.result.n_vertices == 0
        assert session.dag is cherry

    def test_length_mismatch(self, cherry):
        with pytest.raises(InvalidInputError, match="backward"):
            SamplingSession(cherry, np.ones(6), np.ones(7))

    def test_fresh_result_per_session(self, cherry):
        a = SamplingSession(cherry, np.ones(6), np.ones(6))
        b = SamplingSession.from_validated(cherry, a.forward, a.backward)
        assert a.result is not b.result
        assert b.forward is a.forward


# ======================================================================== #
# validate_weights                                                          #
# ======================================================================== #


class TestValidateWeights:
    def test_caller_array_untouched(self):
        w = np.array([1.0, 2.0])
        out = validate_weights(w, 2, "forward")
        assert w.flags.writeable
        assert not out.flags.writeable
        np.testing.assert_array_equal(out, w)

    def test_integer_input_converted(self):
        out = validate_weights([1, 0, 3], 3, "forward")
        assert out.dtype == np.float64

    def test_empty_dag(self):
        assert validate_weights([], 0, "forward").shape == (0,)

    @pytest.mark.parametrize(
        "weights, message",
        [
            ([[1.0, 1.0]], "one-dimensional"),
            ([1.0], "length 1"),
            ([1.0, np.nan], "non-finite"),
            ([1.0, -np.inf], "non-finite"),
            ([1.0, -0.1], "negative"),
        ],
    )
    def test_rejected(self, weights, message):
        with pytest.raises(InvalidInputError, match=message):
            validate_weights(weights, 2, "forward")
