"""
tests/test_context.py
=====================
Tests for the context managers in sbnwalk._context.
"""

import logging
import os
import sys
import warnings

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from sbnwalk import TopologySampler, WeightedRandom
from sbnwalk._context import quiet, seeded, suppress_logger, suppress_warnings

from dags import three_topology_dag


class TestLoggingContexts:
    def test_suppress_logger_restores_level(self):
        logger = logging.getLogger("sbnwalk._dag")
        logger.setLevel(logging.DEBUG)
        try:
            with suppress_logger("sbnwalk._dag"):
                assert logger.level == logging.CRITICAL
            assert logger.level == logging.DEBUG
        finally:
            logger.setLevel(logging.NOTSET)

    def test_restored_after_exception(self):
        logger = logging.getLogger("sbnwalk")
        before = logger.level
        with pytest.raises(RuntimeError):
            with quiet():
                raise RuntimeError("boom")
        assert logger.level == before

    def test_quiet_silences_children(self, caplog):
        with caplog.at_level(logging.DEBUG):
            with quiet():
                three_topology_dag()
                TopologySampler(seed=0)
        assert not [r for r in caplog.records if r.name.startswith("sbnwalk")]

    def test_quiet_keeps_warnings_at_warning_level(self, caplog):
        from sbnwalk import SubsplitDAG

        with caplog.at_level(logging.DEBUG):
            with quiet(logging.WARNING):
                SubsplitDAG([(1, 0), (2, 0), (1, 2), (4, 0)], [(2, 0, 0), (2, 1, 1)])
        levels = {r.levelno for r in caplog.records if r.name.startswith("sbnwalk")}
        assert levels == {logging.WARNING}


class TestSuppressWarnings:
    def test_category(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            with suppress_warnings(DeprecationWarning):
                warnings.warn("hidden", DeprecationWarning)
                warnings.warn("shown", UserWarning)
        assert [str(w.message) for w in caught] == ["shown"]

    def test_all(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            with suppress_warnings():
                warnings.warn("hidden", UserWarning)
        assert caught == []


class TestSeeded:
    def test_block_is_reproducible(self):
        dag = three_topology_dag()
        w = np.ones(dag.n_edges)
        sampler = TopologySampler(seed=0)
        with seeded(sampler, 7):
            a = sampler.sample_many(20, 11, dag, w, w)
        with seeded(sampler, 7):
            b = sampler.sample_many(20, 11, dag, w, w)
        assert a == b

    def test_stream_restored(self):
        rng = WeightedRandom(seed=3)
        w = [1.0, 1.0, 1.0, 1.0]
        reference = WeightedRandom(seed=3)
        expected = [reference.draw(w) for _ in range(40)]

        first = [rng.draw(w) for _ in range(20)]
        with seeded(rng, 99) as stream:
            assert stream is rng
            assert rng.seed == 99
            for _ in range(15):
                rng.draw(w)
        assert rng.seed == 3
        assert first + [rng.draw(w) for _ in range(20)] == expected

    def test_restored_after_exception(self):
        sampler = TopologySampler(seed=5)
        state = sampler.random.get_state()
        with pytest.raises(KeyError):
            with seeded(sampler, 1):
                raise KeyError("x")
        assert sampler.random.get_state()["seed"] == state["seed"]
        assert sampler.random.seed == 5
