"""Tests for vector helpers used by semantic merging."""

import pytest

from chunksmith.chunking.similarity import cosine_sim, mean_vector


class TestCosineSim:
    def test_parallel_and_orthogonal(self):
        assert cosine_sim([1.0, 0.0], [2.0, 0.0]) == pytest.approx(1.0)
        assert cosine_sim([1.0, 0.0], [0.0, 3.0]) == pytest.approx(0.0)
        assert cosine_sim([1.0, 1.0], [-1.0, -1.0]) == pytest.approx(-1.0)

    def test_degenerate_inputs(self):
        """Empty, mismatched or zero vectors score zero instead of failing."""
        assert cosine_sim([], []) == 0.0
        assert cosine_sim([1.0, 0.0], [1.0, 0.0, 0.0]) == 0.0
        assert cosine_sim([0.0, 0.0], [1.0, 0.0]) == pytest.approx(0.0)


class TestMeanVector:
    def test_element_wise_mean(self):
        assert mean_vector([1.0, 3.0], [3.0, 5.0]) == [2.0, 4.0]

    def test_shorter_vector_is_zero_padded(self):
        assert mean_vector([2.0, 4.0], [2.0]) == [2.0, 2.0]
