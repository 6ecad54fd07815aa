"""
Tests for Bradley-Terry probability and likelihood math.

Focus on symmetry and numerical stability.
"""

import math

import numpy as np
import pytest

from card_sort.bradley_terry import (
    PROBABILITY_FLOOR,
    log_likelihood,
    probability,
    probability_matrix,
    top_k_indices,
)


class TestProbability:
    """Test the pairwise win probability."""

    @pytest.mark.parametrize("a,b", [(0.0, 0.0), (1.5, -0.3), (-50.0, 50.0), (12.0, 11.999), (-7.0, -9.5)])
    def test_probability_is_symmetric(self, a: float, b: float) -> None:
        """p(a, b) + p(b, a) must be 1."""
        assert probability(a, b) + probability(b, a) == pytest.approx(1.0, abs=1e-12)

    @pytest.mark.parametrize("a", [-50.0, -1.0, 0.0, 0.3, 50.0, 1e6])
    def test_equal_strengths_give_one_half(self, a: float) -> None:
        """Equal strengths are a coin flip."""
        assert probability(a, a) == 0.5

    def test_matches_logistic_form(self) -> None:
        """Result equals 1 / (1 + e^-(a-b)) where that form is finite."""
        for a, b in [(0.2, -0.1), (3.0, 1.0), (-2.0, 2.5)]:
            expected = 1.0 / (1.0 + math.exp(-(a - b)))
            assert probability(a, b) == pytest.approx(expected, rel=1e-12)

    def test_extreme_strengths_do_not_overflow(self) -> None:
        """Differences far outside [-50, 50] stay within [0, 1]."""
        assert probability(50.0, -50.0) == pytest.approx(1.0)
        assert probability(-50.0, 50.0) == pytest.approx(0.0, abs=1e-40)
        assert 0.0 <= probability(-1000.0, 1000.0) <= 1.0
        assert 0.0 <= probability(1000.0, -1000.0) <= 1.0

    def test_stronger_card_is_favoured(self) -> None:
        assert probability(1.0, 0.0) > 0.5
        assert probability(0.0, 1.0) < 0.5

    def test_matrix_agrees_with_scalar(self) -> None:
        """Vectorized form matches the scalar form entry by entry."""
        strength = np.array([0.4, -0.2, 1.3])
        matrix = probability_matrix(strength)
        for i in range(3):
            for j in range(3):
                assert matrix[i, j] == pytest.approx(probability(strength[i], strength[j]))


class TestLogLikelihood:
    """Test history log-likelihood."""

    def test_empty_history_is_zero(self) -> None:
        assert log_likelihood(np.zeros(3), [], []) == 0.0

    def test_sums_log_probabilities(self) -> None:
        # Arrange
        strength = np.array([0.5, -0.5, 0.0])

        # Act
        ll = log_likelihood(strength, [0, 2], [1, 1])

        # Assert
        expected = math.log(probability(0.5, -0.5)) + math.log(probability(0.0, -0.5))
        assert ll == pytest.approx(expected)

    def test_floor_keeps_likelihood_finite(self) -> None:
        """A practically impossible outcome is clamped, not -inf."""
        strength = np.array([-100.0, 100.0])

        ll = log_likelihood(strength, [0], [1])

        assert math.isfinite(ll), "Log-likelihood must stay finite"
        assert ll == pytest.approx(math.log(PROBABILITY_FLOOR))


class TestTopK:
    """Test top-k selection."""

    def test_orders_by_descending_strength(self) -> None:
        assert top_k_indices(np.array([0.1, 0.9, -0.3, 0.5]), 3) == [1, 3, 0]

    def test_ties_keep_card_order(self) -> None:
        assert top_k_indices(np.array([0.0, 0.2, 0.0, 0.2]), 4) == [1, 3, 0, 2]

    def test_k_larger_than_size_returns_all(self) -> None:
        assert top_k_indices(np.zeros(3), 11) == [0, 1, 2]
